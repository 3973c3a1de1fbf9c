# JR Driving: database models
# Import all models here for SQLAlchemy discovery

from jrdriving.models.user import User, Profile, Role                                  # noqa
from jrdriving.models.mission import Mission, MissionStatus, MissionPriority           # noqa
from jrdriving.models.quote import Quote, QuoteAttachment, QuoteStatus                 # noqa
from jrdriving.models.driver_application import (                                      # noqa
    DriverApplication, DriverApplicationAttachment, ApplicationStatus,
)
from jrdriving.models.password_reset_token import PasswordResetToken                   # noqa
