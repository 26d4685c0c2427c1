from __future__ import annotations

from typing import Annotated, Generator

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from ingestion.services.container import NewsServices


def get_services(request: Request) -> NewsServices:
    return request.app.state.services


ServicesDep = Annotated[NewsServices, Depends(get_services)]


def session_dependency(services: ServicesDep) -> Generator[Session, None, None]:
    with services.session() as session:
        yield session


SessionDep = Annotated[Session, Depends(session_dependency)]
