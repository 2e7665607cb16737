from unittest.mock import AsyncMock, patch

import pytest
from pymongo.errors import ServerSelectionTimeoutError

from src.exceptions import Conflict, NotFound

pytestmark = pytest.mark.asyncio


async def participants(challenge_repository, challenge_id):
    challenge = await challenge_repository.get_by_id(challenge_id)
    return challenge["participants"]


class TestJoin:
    async def test_join_creates_user_challenge(self, enrollment_service, challenge_repository,
                                               user_challenge_repository):
        challenge_id = await challenge_repository.create({"createdBy": "u1"})

        user_challenge = await enrollment_service.join("u2", challenge_id)

        assert user_challenge["status"] == "Not Started"
        assert user_challenge["progress"] == 0
        assert user_challenge["joinDate"] is not None
        assert await user_challenge_repository.exists_for_user_and_challenge("u2", challenge_id)
        assert await participants(challenge_repository, challenge_id) == 1

    async def test_join_twice_is_rejected(self, enrollment_service, challenge_repository, user_challenge_repository):
        challenge_id = await challenge_repository.create({"createdBy": "u1"})
        await enrollment_service.join("u2", challenge_id)

        with pytest.raises(Conflict):
            await enrollment_service.join("u2", challenge_id)

        assert len(await user_challenge_repository.list_by_user("u2")) == 1
        assert await participants(challenge_repository, challenge_id) == 1

    async def test_unique_index_rejects_duplicate_insert(self, enrollment_service, challenge_repository,
                                                        user_challenge_repository):
        challenge_id = await challenge_repository.create({"createdBy": "u1"})
        await enrollment_service.join("u2", challenge_id)

        # a concurrent join that already passed the existence check
        with patch.object(user_challenge_repository, "exists_for_user_and_challenge",
                          new=AsyncMock(return_value=False)):
            with pytest.raises(Conflict):
                await enrollment_service.join("u2", challenge_id)

        assert await participants(challenge_repository, challenge_id) == 1

    async def test_join_normalizes_challenge_id(self, enrollment_service, challenge_repository):
        challenge_id = await challenge_repository.create({"createdBy": "u1"})
        await enrollment_service.join("u2", challenge_id)

        with pytest.raises(Conflict):
            await enrollment_service.join("u2", challenge_id.upper())

        assert await participants(challenge_repository, challenge_id) == 1
        assert await enrollment_service.reconcile_participants(challenge_id) == []

    async def test_join_with_upper_case_id_merges_challenge(self, enrollment_service, challenge_repository):
        challenge_id = await challenge_repository.create({"createdBy": "u1", "title": "Cold showers"})

        user_challenge = await enrollment_service.join("u2", challenge_id.upper())

        assert user_challenge["challengeId"] == challenge_id
        [entry] = await enrollment_service.list_merged("u2")
        assert entry["challenge"]["title"] == "Cold showers"

    async def test_join_unknown_challenge_still_enrolls(self, enrollment_service, user_challenge_repository):
        await enrollment_service.join("u2", "0123456789abcdef01234567")

        assert await user_challenge_repository.exists_for_user_and_challenge("u2", "0123456789abcdef01234567")

    async def test_counter_failure_leaves_enrollment(self, enrollment_service, challenge_repository,
                                                     user_challenge_repository):
        challenge_id = await challenge_repository.create({"createdBy": "u1"})

        with patch.object(challenge_repository, "adjust_participants",
                          new=AsyncMock(side_effect=ServerSelectionTimeoutError("down"))):
            with pytest.raises(ServerSelectionTimeoutError):
                await enrollment_service.join("u2", challenge_id)

        assert await user_challenge_repository.exists_for_user_and_challenge("u2", challenge_id)
        assert await participants(challenge_repository, challenge_id) == 0


class TestLeave:
    async def test_leave_removes_user_challenge(self, enrollment_service, challenge_repository,
                                                user_challenge_repository):
        challenge_id = await challenge_repository.create({"createdBy": "u1"})
        user_challenge = await enrollment_service.join("u2", challenge_id)

        await enrollment_service.leave(str(user_challenge["_id"]))

        assert not await user_challenge_repository.exists_for_user_and_challenge("u2", challenge_id)
        assert await participants(challenge_repository, challenge_id) == 0

    @pytest.mark.parametrize("user_challenge_id", ["0123456789abcdef01234567", "bad-id"])
    async def test_leave_missing(self, enrollment_service, user_challenge_id):
        with pytest.raises(NotFound):
            await enrollment_service.leave(user_challenge_id)

    async def test_leave_after_challenge_deleted(self, enrollment_service, challenge_repository,
                                                 user_challenge_repository):
        challenge_id = await challenge_repository.create({"createdBy": "u1"})
        user_challenge = await enrollment_service.join("u2", challenge_id)
        await challenge_repository.delete(challenge_id)

        await enrollment_service.leave(str(user_challenge["_id"]))

        assert await user_challenge_repository.list_by_user("u2") == []


class TestListMerged:
    async def test_merges_challenges_in_enrollment_order(self, enrollment_service, challenge_repository):
        first = await challenge_repository.create({"createdBy": "u1", "title": "First"})
        second = await challenge_repository.create({"createdBy": "u1", "title": "Second"})
        await enrollment_service.join("u2", second)
        await enrollment_service.join("u2", first)
        await enrollment_service.join("u3", first)

        merged = await enrollment_service.list_merged("u2")

        assert [entry["challengeId"] for entry in merged] == [second, first]
        assert [entry["challenge"]["title"] for entry in merged] == ["Second", "First"]

    async def test_dangling_and_malformed_references(self, enrollment_service, challenge_repository):
        deleted = await challenge_repository.create({"createdBy": "u1"})
        await enrollment_service.join("u2", deleted)
        await enrollment_service.join("u2", "not-an-object-id")
        await challenge_repository.delete(deleted)

        merged = await enrollment_service.list_merged("u2")

        assert len(merged) == 2
        assert all(entry["challenge"] is None for entry in merged)

    async def test_user_without_challenges(self, enrollment_service):
        assert await enrollment_service.list_merged("nobody") == []


class TestReconcileParticipants:
    async def test_repairs_drift(self, enrollment_service, challenge_repository):
        challenge_id = await challenge_repository.create({"createdBy": "u1"})
        await enrollment_service.join("u2", challenge_id)
        await enrollment_service.join("u3", challenge_id)
        await challenge_repository.adjust_participants(challenge_id, 5)

        updated = await enrollment_service.reconcile_participants(challenge_id)

        assert updated == [{"challengeId": challenge_id, "previous": 7, "current": 2}]
        assert await participants(challenge_repository, challenge_id) == 2

    async def test_all_challenges(self, enrollment_service, challenge_repository):
        in_sync = await challenge_repository.create({"createdBy": "u1"})
        drifted = await challenge_repository.create({"createdBy": "u1", "participants": 3})
        await enrollment_service.join("u2", in_sync)

        updated = await enrollment_service.reconcile_participants()

        assert updated == [{"challengeId": drifted, "previous": 3, "current": 0}]
        assert await participants(challenge_repository, in_sync) == 1
