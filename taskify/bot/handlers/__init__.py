from .states import (
    ASKING_CATEGORY,
    ASKING_CONFIRMATION,
    ASKING_DUE_DATE,
    ASKING_PRIORITY,
    ASKING_TITLE,
)
from .handle_new_task import (
    cancel_new_task,
    handle_category,
    handle_due_date,
    handle_priority,
    handle_title,
    start_new_task,
)
from .handle_confirmation import handle_confirmation
