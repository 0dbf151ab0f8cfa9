import enum
# =========================================================
# ENUMS
# =========================================================
class TaskKind(str, enum.Enum):
    daily = "daily"
    oneoff = "oneoff"

class ReminderCategory(str, enum.Enum):
    overdue = "overdue"
    pending = "pending"
