"""Email values and the content assembly pipeline.

Only the value types are re-exported here; the pipeline lives in
:mod:`jmapmail.core.assembly`, which depends on the protocol layer.
"""

from .email import Attachment, Email, EmailAddress, EmailBodyPart, Thread

__all__ = ["Attachment", "Email", "EmailAddress", "EmailBodyPart", "Thread"]
