import pytest
from hearth.models.household import HouseholdMemberRole
from hearth.models.tag import Tag
from hearth.models.task import Task
from hearth.schemas.household import HouseholdCreate
from hearth.core.exception import ResourceNotFoundException


@pytest.fixture
def setting(unit_of_work, household_service, make_member):
    """
    A household with an admin, an active member without any Permission,
    two extra tags and tasks T1 {tagA}, T2 {}, T3 {tagB}, T4 {}.
    """
    admin = make_member("Admin")
    member = make_member("Member")
    household = household_service.create_household(admin.id, HouseholdCreate(name="Home"))
    household_service.invite_member(admin.id, household.id, member.id, "member")
    household_service.accept_invite(member.id, household.id)

    with unit_of_work.transaction() as context:
        tag_a = context.tags.create(Tag(name="tagA", color="#000001", household_id=household.id))
        tag_b = context.tags.create(Tag(name="tagB", color="#000002", household_id=household.id))
        tasks = {}
        for title, tag_ids in (("T1", [tag_a.id]), ("T2", []), ("T3", [tag_b.id]), ("T4", [])):
            task = context.tasks.create(
                Task(title=title, created_by_id=admin.id, household_id=household.id)
            )
            context.task_tags.create_many(task.id, tag_ids)
            tasks[title] = task.id
        member_row = context.households.find_member_by_id(household.id, member.id)

    return {
        "household": household,
        "household_member_id": member_row.id,
        "tag_a": tag_a.id,
        "tag_b": tag_b.id,
        "tasks": tasks,
    }


@pytest.mark.unit
class TestFilterTasksByTagPermissions:
    """Unit tests for TagPermissionManager.filter_tasks_by_tag_permissions."""

    def test_empty_input(self, unit_of_work, tag_permission_manager, setting):
        with unit_of_work.transaction() as context:
            assert tag_permission_manager.filter_tasks_by_tag_permissions(
                context, setting["household_member_id"], []
            ) == []

    def test_without_permission_keeps_only_untagged(self, unit_of_work, tag_permission_manager, setting):
        """No Permission row hides every tagged task but never untagged ones."""
        tasks = setting["tasks"]
        task_ids = [tasks["T1"], tasks["T2"], tasks["T3"], tasks["T4"]]

        with unit_of_work.transaction() as context:
            visible = tag_permission_manager.filter_tasks_by_tag_permissions(
                context, setting["household_member_id"], task_ids
            )

        assert visible == [tasks["T2"], tasks["T4"]]

    def test_untagged_tasks_pass_through_unchanged(self, unit_of_work, tag_permission_manager, setting):
        tasks = setting["tasks"]
        task_ids = [tasks["T4"], tasks["T2"]]

        with unit_of_work.transaction() as context:
            before = tag_permission_manager.filter_tasks_by_tag_permissions(
                context, setting["household_member_id"], task_ids
            )
            tag_permission_manager.create_permissions_with_tags(
                context, setting["household_member_id"], [setting["tag_b"]]
            )
            after = tag_permission_manager.filter_tasks_by_tag_permissions(
                context, setting["household_member_id"], task_ids
            )

        assert before == task_ids
        assert after == task_ids

    def test_order_is_preserved(self, unit_of_work, tag_permission_manager, setting):
        """The result is a subsequence of the input in the same order."""
        tasks = setting["tasks"]
        task_ids = [tasks["T4"], tasks["T3"], tasks["T2"], tasks["T1"]]

        with unit_of_work.transaction() as context:
            tag_permission_manager.create_permissions_with_tags(
                context, setting["household_member_id"], [setting["tag_b"]]
            )
            visible = tag_permission_manager.filter_tasks_by_tag_permissions(
                context, setting["household_member_id"], task_ids
            )

        assert visible == [tasks["T4"], tasks["T3"], tasks["T2"]]
        positions = [task_ids.index(task_id) for task_id in visible]
        assert positions == sorted(positions)

    def test_filter_then_grant_scenario(self, unit_of_work, tag_permission_manager, setting):
        """T1 {tagA} is hidden behind {tagB} and shows up once tagA is granted."""
        household_member_id = setting["household_member_id"]
        t1 = setting["tasks"]["T1"]

        with unit_of_work.transaction() as context:
            tag_permission_manager.create_permissions_with_tags(
                context, household_member_id, [setting["tag_b"]]
            )
            assert tag_permission_manager.filter_tasks_by_tag_permissions(
                context, household_member_id, [t1]
            ) == []

            tag_permission_manager.give_tag_permissions_to_member(
                context, household_member_id, [setting["tag_a"]]
            )
            assert tag_permission_manager.filter_tasks_by_tag_permissions(
                context, household_member_id, [t1]
            ) == [t1]


@pytest.mark.unit
class TestTagGrants:
    """Unit tests for creating and extending tag grants."""

    def test_create_permissions_with_tags(self, unit_of_work, tag_permission_manager, setting):
        household_member_id = setting["household_member_id"]

        with unit_of_work.transaction() as context:
            permission = tag_permission_manager.create_permissions_with_tags(
                context, household_member_id, [setting["tag_a"], setting["tag_b"]]
            )
            grants = context.tag_permissions.find_by_permission_id(permission.id)

        assert permission.household_member_id == household_member_id
        assert {grant.tag_id for grant in grants} == {setting["tag_a"], setting["tag_b"]}

    def test_give_requires_permission(self, unit_of_work, tag_permission_manager, setting):
        with unit_of_work.transaction() as context:
            with pytest.raises(ResourceNotFoundException) as exc_info:
                tag_permission_manager.give_tag_permissions_to_member(
                    context, setting["household_member_id"], [setting["tag_a"]]
                )

        assert "No permission record" in str(exc_info.value)

    def test_give_is_idempotent_per_tag(self, unit_of_work, tag_permission_manager, setting):
        """Granting the same tags twice leaves one grant per tag."""
        household_member_id = setting["household_member_id"]
        tag_ids = [setting["tag_a"], setting["tag_b"]]

        with unit_of_work.transaction() as context:
            permission = tag_permission_manager.create_permissions_with_tags(
                context, household_member_id, []
            )
            first = tag_permission_manager.give_tag_permissions_to_member(
                context, household_member_id, tag_ids
            )
            second = tag_permission_manager.give_tag_permissions_to_member(
                context, household_member_id, tag_ids + [setting["tag_a"]]
            )
            grants = context.tag_permissions.find_by_permission_id(permission.id)

        assert len(first) == 2
        assert second == []
        assert sorted(grant.tag_id for grant in grants) == sorted(tag_ids)

    def test_give_dedupes_input(self, unit_of_work, tag_permission_manager, setting):
        household_member_id = setting["household_member_id"]

        with unit_of_work.transaction() as context:
            tag_permission_manager.create_permissions_with_tags(context, household_member_id, [])
            created = tag_permission_manager.give_tag_permissions_to_member(
                context, household_member_id, [setting["tag_a"], setting["tag_a"]]
            )

        assert len(created) == 1


@pytest.mark.unit
class TestViewableTags:
    """Unit tests for reading a member's viewable tags."""

    def test_no_permission_means_no_tags(self, unit_of_work, tag_permission_manager, setting):
        with unit_of_work.transaction() as context:
            assert tag_permission_manager.get_user_viewable_tags(
                context, setting["household_member_id"]
            ) == []
            assert tag_permission_manager.get_user_viewable_tag_ids(
                context, setting["household_member_id"]
            ) == set()

    def test_granted_tags_are_returned(self, unit_of_work, tag_permission_manager, setting):
        with unit_of_work.transaction() as context:
            tag_permission_manager.create_permissions_with_tags(
                context, setting["household_member_id"], [setting["tag_b"], setting["tag_a"]]
            )
            tags = tag_permission_manager.get_user_viewable_tags(
                context, setting["household_member_id"]
            )

        assert [tag.name for tag in tags] == ["tagA", "tagB"]

    def test_admin_sees_default_tags(self, unit_of_work, tag_permission_manager, setting):
        household = setting["household"]

        with unit_of_work.transaction() as context:
            admin_row = next(
                row for row in context.households.find_members(household.id)
                if row.role == HouseholdMemberRole.ADMIN
            )
            names = {
                tag.name
                for tag in tag_permission_manager.get_user_viewable_tags(context, admin_row.id)
            }

        assert {"metas", "adult", "work", "kids", "chores"} <= names
        assert "tagA" not in names
