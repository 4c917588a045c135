from fastapi import APIRouter, Depends

from foodcart.routes.dependencies import get_session_context
from foodcart.schemas.session.session import SessionCreate, SessionRead
from foodcart.services.session_context import SessionContext


class SessionRouter(APIRouter):
    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)

        self.add_api_route("/session/", self.sign_in, methods=["POST"], response_model=SessionRead)
        self.add_api_route("/session/", self.current_session, methods=["GET"], response_model=SessionRead)
        self.add_api_route("/session/", self.sign_out, methods=["DELETE"], response_model=dict)

    def sign_in(self, data: SessionCreate, session: SessionContext = Depends(get_session_context)):
        account_id = session.sign_in(data.account_id)
        return SessionRead(account_id=account_id)

    def current_session(self, session: SessionContext = Depends(get_session_context)):
        return SessionRead(account_id=session.current_account)

    def sign_out(self, session: SessionContext = Depends(get_session_context)):
        session.sign_out()
        return {"message": "Signed out"}
