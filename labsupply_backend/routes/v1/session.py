"""로그인 학생 설정/해제. 인증 서버 로그인 성공 후 앱이 id_estudiante 를 전달."""
from typing import Annotated

from fastapi import APIRouter, Depends, status

from ...container import Container
from ...middleware.deps import get_container
from ...schemas.poller import SessionRequest

router = APIRouter()


@router.put("", status_code=status.HTTP_204_NO_CONTENT, summary="로그인 학생 저장")
async def set_session(
    body: SessionRequest,
    container: Annotated[Container, Depends(get_container)],
):
    await container.sessions.login(body.studentId)


@router.delete("", status_code=status.HTTP_204_NO_CONTENT, summary="로그아웃 (polling 은 다음 tick 부터 건너뜀)")
async def clear_session(container: Annotated[Container, Depends(get_container)]):
    await container.sessions.logout()
