from ninja_extra import ControllerBase, api_controller, route

from common.authentication import ContextJWTAuth
from common.models import SiteSettings
from common.schema import ActionResponse, SiteSettingsSchema, SiteSettingsUpdateSchema
from common.throttling import WriteThrottle
from events.controllers.permissions import IsTeamAdmin, IsTeamMember


@api_controller("/settings", auth=ContextJWTAuth(), permissions=[IsTeamMember], tags=["Settings"])
class SiteSettingsController(ControllerBase):
    @route.get("/", url_name="get_settings", response=ActionResponse[SiteSettingsSchema])
    def get_settings(self) -> dict[str, object]:
        return {"data": SiteSettings.get_solo()}

    @route.put(
        "/",
        url_name="update_settings",
        response=ActionResponse[SiteSettingsSchema],
        permissions=[IsTeamAdmin],
        throttle=WriteThrottle(),
    )
    def update_settings(self, payload: SiteSettingsUpdateSchema) -> dict[str, object]:
        """Update the venue name and the host bio new events start with."""
        site_settings = SiteSettings.get_solo()
        site_settings.venue_name = payload.venue_name
        site_settings.default_host_bio = payload.default_host_bio
        site_settings.save()
        return {"data": site_settings}
