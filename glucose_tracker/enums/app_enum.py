from enum import Enum


class LanguageEnum(str, Enum):
    en = "en"
    zh = "zh"


class RecordOperationEnum(str, Enum):
    read_list = "read-list"
    read = "read"
    create = "create"
    update = "update"
    delete = "delete"


class AccessOutcomeEnum(str, Enum):
    allow = "allow"
    deny = "deny"
    not_found = "not-found"


class LevelStatusEnum(str, Enum):
    low = "low"
    normal = "normal"
    elevated = "elevated"
    high = "high"
