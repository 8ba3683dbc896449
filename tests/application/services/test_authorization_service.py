import pytest

from listings.domain.entities.activity import RequestContext
from listings.domain.exceptions import ForbiddenError, UnauthorizedError
from listings.domain.services.permission_evaluator import DenialKind
from listings.shared.enums import Action, ActivityStatus, ResourceKind, Role


class TestAuthorize:
    @pytest.mark.parametrize(
        "kind", [ResourceKind.SUBADMIN, ResourceKind.ACTIVITY, ResourceKind.USER_ACTIVITY]
    )
    def test_admin_only_kinds_reject_subadmins(self, authz, subadmin_a, kind):
        decision = authz.authorize(subadmin_a, Action.READ, kind)

        assert decision.allowed is False
        assert decision.denial == DenialKind.UNAUTHORIZED

    def test_admin_passes_admin_only_kind(self, authz, admin):
        assert authz.authorize(admin, Action.CREATE, ResourceKind.SUBADMIN).allowed is True

    def test_listing_kinds_defer_to_evaluator(self, authz, subadmin_a):
        own = {"created_by": subadmin_a.id}
        foreign = {"created_by": "sub-b"}

        assert authz.authorize(subadmin_a, Action.UPDATE, ResourceKind.MESS, own).allowed
        decision = authz.authorize(subadmin_a, Action.UPDATE, ResourceKind.MESS, foreign)
        assert decision.denial == DenialKind.FORBIDDEN

    def test_require_raises_matching_exception(self, authz, subadmin_a, plain_user):
        with pytest.raises(ForbiddenError) as forbidden:
            authz.require(subadmin_a, Action.DELETE, ResourceKind.PROPERTY, {"created_by": "x"})
        with pytest.raises(UnauthorizedError):
            authz.require(plain_user, Action.READ, ResourceKind.PROPERTY)

        assert forbidden.value.status_code == 403
        assert forbidden.value.details["resource"] == "PROPERTY"


class TestRequireRole:
    async def test_matching_role_passes_without_audit(self, authz, admin, activity_store):
        await authz.require_role(admin, Role.ADMIN)

        assert activity_store.records == []

    async def test_wrong_role_is_audited_as_unauthorized_access(
        self, authz, subadmin_a, activity_store
    ):
        """
        GIVEN a subadmin hitting an admin-only route
        WHEN the role gate runs
        THEN a FAILED READ on UNAUTHORIZED_ACCESS naming the path is recorded
        AND ForbiddenError is raised.
        """
        context = RequestContext(ip_address="127.0.0.1", path="/api/v1/activities/")

        with pytest.raises(ForbiddenError):
            await authz.require_role(subadmin_a, Role.ADMIN, context=context)

        [record] = activity_store.records
        assert record.status == ActivityStatus.FAILED
        assert record.resource_kind == "UNAUTHORIZED_ACCESS"
        assert record.detail == "Attempted to access /api/v1/activities/"
        assert record.actor_id == subadmin_a.id

    async def test_inactive_principal_is_unauthorized(self, authz, inactive_subadmin):
        with pytest.raises(UnauthorizedError):
            await authz.require_role(inactive_subadmin, Role.SUBADMIN)
