from .user import User
from .blood_sugar_record import BloodSugarRecord
from .revoked_token import RevokedToken
