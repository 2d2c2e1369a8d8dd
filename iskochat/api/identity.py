from fastapi import Header, HTTPException


def get_current_participant_id(x_user_id: str | None = Header(None, alias="X-User-Id")) -> str:
    """Identity is resolved upstream by the auth provider and trusted as given."""
    participant_id = (x_user_id or "").strip()
    if not participant_id:
        raise HTTPException(status_code=401, detail="Missing X-User-Id header")
    return participant_id
