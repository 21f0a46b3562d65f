from .actor_context import acting_as, get_current_staff_id
from .time_utils import clinic_now, clinic_today

__all__ = ['acting_as', 'clinic_now', 'clinic_today', 'get_current_staff_id']
