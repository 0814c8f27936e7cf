'''
The audit trail on disasters.
Events are only ever appended; existing entries are not edited, removed or reordered.
'''

import logging

from dal.models import AuditEvent, UNKNOWN_USER
from dal.utils import utcnow

logger = logging.getLogger(__name__)


def append_audit_event(audit_trail, action, user_id, now=None):
    """
    Return a new audit trail with an event for this action appended.
    The trail passed in is not modified; the caller persists the result.
    :param audit_trail - the current trail; None or empty for a new record.
    :param action - create, update or delete
    :param user_id - the user making the change; "unknown" if not known.
    :param now - the time of the change; defaults to the current UTC time.
    """
    timestamp = (now or utcnow()).isoformat()
    event = AuditEvent(action=action, user_id=user_id or UNKNOWN_USER, timestamp=timestamp)
    trail = [x if isinstance(x, AuditEvent) else AuditEvent(**x) for x in (audit_trail or [])]
    logger.debug("Appending %s by %s to an audit trail of length %s", action, event.user_id, len(trail))
    return trail + [event]
