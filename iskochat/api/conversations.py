from fastapi import APIRouter, Depends, HTTPException, Query

from iskochat.api.identity import get_current_participant_id
from iskochat.api.schemas import (
    ConversationStatsSchema,
    ConversationSummarySchema,
    MarkReadResponseSchema,
    MeetupRequestSchema,
    MessageSchema,
    SendMessageRequestSchema,
    SendMessageResponseSchema,
)
from iskochat.application.exceptions import ConstraintViolation, ConversationNotFoundError
from iskochat.application.use_cases.conversation_stats import ConversationStatsUseCase
from iskochat.application.use_cases.get_messages import GetMessagesUseCase
from iskochat.application.use_cases.list_conversations import ConversationFilter, ListConversationsUseCase
from iskochat.application.use_cases.manage_meetup import MeetupAction, MeetupUseCase
from iskochat.application.use_cases.mark_read import MarkReadUseCase
from iskochat.application.use_cases.send_message import SendMessageUseCase
from iskochat.wiring.dependencies import (
    get_conversation_stats_use_case,
    get_list_conversations_use_case,
    get_mark_read_use_case,
    get_meetup_use_case,
    get_messages_use_case,
    get_send_message_use_case,
)

router = APIRouter()


@router.get("/conversations", response_model=list[ConversationSummarySchema])
def list_conversations(
    view: ConversationFilter = Query(ConversationFilter.all, alias="filter"),
    participant_id: str = Depends(get_current_participant_id),
    uc: ListConversationsUseCase = Depends(get_list_conversations_use_case),
):
    conversations = uc.execute(participant_id, view)
    return [ConversationSummarySchema.from_entity(c, participant_id) for c in conversations]


@router.get("/conversations/stats", response_model=ConversationStatsSchema)
def conversation_stats(
    participant_id: str = Depends(get_current_participant_id),
    uc: ConversationStatsUseCase = Depends(get_conversation_stats_use_case),
):
    return ConversationStatsSchema.from_entity(uc.execute(participant_id))


@router.get("/conversations/{conversation_id}/messages", response_model=list[MessageSchema])
def list_messages(
    conversation_id: str,
    participant_id: str = Depends(get_current_participant_id),
    uc: GetMessagesUseCase = Depends(get_messages_use_case),
):
    try:
        messages = uc.execute(participant_id, conversation_id)
    except ConversationNotFoundError:
        raise HTTPException(status_code=404, detail="Conversation not found")
    except ConstraintViolation as e:
        raise HTTPException(status_code=403, detail=str(e))
    return [MessageSchema.from_entity(m, participant_id) for m in messages]


@router.post("/conversations/{conversation_id}/messages", response_model=SendMessageResponseSchema, status_code=201)
def send_message(
    conversation_id: str,
    req: SendMessageRequestSchema,
    participant_id: str = Depends(get_current_participant_id),
    uc: SendMessageUseCase = Depends(get_send_message_use_case),
):
    try:
        result = uc.execute(conversation_id, participant_id, req.body)
    except ConversationNotFoundError:
        raise HTTPException(status_code=404, detail="Conversation not found")
    except ConstraintViolation as e:
        raise HTTPException(status_code=403, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return SendMessageResponseSchema(
        message=MessageSchema.from_entity(result.message, participant_id),
        notified=result.notified,
        auto_reply=MessageSchema.from_entity(result.auto_reply, participant_id) if result.auto_reply else None,
    )


@router.post("/conversations/{conversation_id}/read", response_model=MarkReadResponseSchema)
def mark_read(
    conversation_id: str,
    participant_id: str = Depends(get_current_participant_id),
    uc: MarkReadUseCase = Depends(get_mark_read_use_case),
):
    try:
        updated = uc.execute(participant_id, conversation_id)
    except ConversationNotFoundError:
        raise HTTPException(status_code=404, detail="Conversation not found")
    except ConstraintViolation as e:
        raise HTTPException(status_code=403, detail=str(e))
    return MarkReadResponseSchema(updated=updated)


@router.post("/conversations/{conversation_id}/meetup/{action}", response_model=ConversationSummarySchema)
def update_meetup(
    conversation_id: str,
    action: MeetupAction,
    req: MeetupRequestSchema | None = None,
    participant_id: str = Depends(get_current_participant_id),
    uc: MeetupUseCase = Depends(get_meetup_use_case),
):
    meetup_date = req.meetup_date if req else None
    try:
        conversation = uc.execute(participant_id, conversation_id, action, meetup_date=meetup_date)
    except ConversationNotFoundError:
        raise HTTPException(status_code=404, detail="Conversation not found")
    except ConstraintViolation as e:
        raise HTTPException(status_code=403, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return ConversationSummarySchema.from_entity(conversation, participant_id)
