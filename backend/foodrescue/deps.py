from functools import lru_cache

from fastapi import Depends, HTTPException

from foodrescue.core.config import Settings, get_settings, settings
from foodrescue.core.security import get_token_subject
from foodrescue.services.identity import Session, resolve_session
from foodrescue.services.notifier import Notifier


@lru_cache(maxsize=1)
def _repo_singleton():
    if settings.use_mongo:
        from foodrescue.core.db import get_db
        from foodrescue.repos.mongo import MongoRepo
        return MongoRepo(get_db())
    from foodrescue.repos.inmemory import InMemoryRepo
    return InMemoryRepo()


def get_repo():
    return _repo_singleton()


def get_notifier(settings: Settings = Depends(get_settings)) -> Notifier:
    return Notifier(settings.slack_webhook_url, timeout_s=settings.webhook_timeout_s)


async def get_current_user(sub: str = Depends(get_token_subject), repo=Depends(get_repo)) -> dict:
    user = await repo.get_user(sub)
    if not user:
        raise HTTPException(status_code=401, detail="User not found")
    return user


async def get_session(
    user: dict = Depends(get_current_user),
    repo=Depends(get_repo),
    settings: Settings = Depends(get_settings),
) -> Session:
    return await resolve_session(repo, user, settings)


async def require_admin(session: Session = Depends(get_session)) -> Session:
    if not session.is_admin:
        raise HTTPException(status_code=403, detail="Admin access required")
    return session
