"""
Publishing side of the realtime notifier.

Routes call these after their write has committed. Payloads are serialised
here, inside the request, and the actual delivery is queued as a background
task so it runs after the response and can never change it.
"""

from fastapi import BackgroundTasks
from pydantic import BaseModel

from complaint_desk.services.notifier import ComplaintNotifier, EventType, room_for


def _to_payload(model: BaseModel) -> dict:
    return model.model_dump(mode="json", by_alias=True)


def publish_new_complaint(
    background_tasks: BackgroundTasks, notifier: ComplaintNotifier, complaint: BaseModel
) -> None:
    background_tasks.add_task(notifier.broadcast, EventType.NEW_COMPLAINT, _to_payload(complaint))


def publish_complaint_updated(
    background_tasks: BackgroundTasks, notifier: ComplaintNotifier, complaint: BaseModel
) -> None:
    """complaint-updated to the complaint's room, status-change to everyone"""
    payload = _to_payload(complaint)
    background_tasks.add_task(
        notifier.emit_to_room, room_for(complaint.id), EventType.COMPLAINT_UPDATED, payload
    )
    background_tasks.add_task(notifier.broadcast, EventType.STATUS_CHANGE, payload)


def publish_new_comment(
    background_tasks: BackgroundTasks, notifier: ComplaintNotifier, comment: BaseModel
) -> None:
    background_tasks.add_task(
        notifier.emit_to_room, room_for(comment.complaint_id), EventType.NEW_COMMENT, _to_payload(comment)
    )
