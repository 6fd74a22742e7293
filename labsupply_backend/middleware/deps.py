"""라우터 의존성: lifespan 에서 만든 Container 를 꺼내 씀."""
from fastapi import Request

from ..container import Container


def get_container(request: Request) -> Container:
    return request.app.state.container
