"""
Social accounts linked by the authenticated user.
"""

from fastapi import APIRouter

from postboard.core.social import SocialAccountData
from postboard.service import social as social_service

from .dependencies import DatabaseDependency, LoggerDependency, SessionDependency

social_app = APIRouter(tags=["Social Accounts"])


@social_app.get(
    "/social-accounts",
    response_model=list[SocialAccountData],
    summary="Linked social accounts",
    description="All social accounts linked by the authenticated user, oldest first.",
    responses={401: {"description": "Not logged in"}},
)
async def social_accounts(
    login_session: SessionDependency,
    conn: DatabaseDependency,
    log: LoggerDependency,
) -> list[SocialAccountData]:
    accounts = await social_service.read_by_user(
        user_id=login_session.user_id, conn=conn
    )

    log = log.bind(user_id=login_session.user_id, number_of_accounts=len(accounts))
    await log.adebug("api.social.list")

    return accounts
