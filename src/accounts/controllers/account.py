from ninja_extra import api_controller, route

from accounts import schema
from accounts.models import GatepassUser
from common.authentication import I18nJWTAuth
from common.controllers import UserAwareController


@api_controller("/account", auth=I18nJWTAuth(), tags=["Account"])
class AccountController(UserAwareController):
    @route.get("/me", url_name="me", response=schema.GatepassUserSchema)
    def me(self) -> GatepassUser:
        """Return the authenticated user's profile."""
        return self.user()
