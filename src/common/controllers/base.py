import typing as t

from ninja_extra import ControllerBase

from accounts.models import GatepassUser


class UserAwareController(ControllerBase):
    def user(self) -> GatepassUser:
        """Get the user for this request."""
        return t.cast(GatepassUser, self.context.request.user)  # type: ignore[union-attr]
