from fastapi import Request, HTTPException, Depends
from typing import Optional, Dict, Any
import logging

import storefront.infra.supabase_client as supabase_client

logger = logging.getLogger(__name__)

def _bearer_token(request: Request) -> Optional[str]:
    auth_header = request.headers.get("Authorization", "")
    if auth_header.startswith("Bearer "):
        return auth_header[7:].strip() or None
    return None

def get_user_from_access_token(access_token: str) -> Dict[str, Any]:
    """Récupère et normalise l’utilisateur depuis supabase.auth.get_user(access_token)."""
    res = supabase_client.get_supabase().auth.get_user(access_token)
    user = getattr(res, "user", None) or {}
    if not isinstance(user, dict):
        user = {
            "id": getattr(user, "id", None),
            "email": getattr(user, "email", None),
            "metadata": getattr(user, "user_metadata", None) or {},
        }
    return user or {}

def get_current_user(request: Request) -> Dict[str, Any]:
    token = _bearer_token(request)
    if not token:
        raise HTTPException(status_code=401, detail="Non authentifié")
    try:
        user = get_user_from_access_token(token)
    except Exception:
        logger.warning("security.get_current_user token rejected")
        raise HTTPException(status_code=401, detail="Session expirée, veuillez vous connecter")
    if not user.get("id"):
        raise HTTPException(status_code=401, detail="Session expirée, veuillez vous connecter")
    return user

def require_user(user: Dict[str, Any] = Depends(get_current_user)) -> Dict[str, Any]:
    return user

def optional_user(request: Request) -> Optional[Dict[str, Any]]:
    """Utilisateur si un Bearer valide est présent, sinon None (checkout invité)."""
    if not _bearer_token(request):
        return None
    try:
        return get_current_user(request)
    except HTTPException:
        return None
