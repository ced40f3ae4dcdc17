from .region.region_model import Region
from .admin.admin_model import Admin, AdminRole, admin_regions
from .rating.rating_model import Rating
from .feedback.feedback_model import Feedback, FeedbackStatus
from .user.user import User
from .log.log_model import LogEntry, AuditAction
