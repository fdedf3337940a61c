# Bu araç @keyiflerolsun tarafından | @KekikAkademi için yazılmıştır.

from unittest.mock import AsyncMock, patch
import unittest

from Libs                  import NotFound, AccessDenied, UpstreamUnavailable
from Public.WebSocket.Libs import AccessPolicy
from tests.helpers         import build_gateway, ALICE, BOB

class TestAccessPolicy(unittest.IsolatedAsyncioTestCase):
    async def asyncSetUp(self):
        self.gateway   = build_gateway()
        self.directory = self.gateway.directory
        self.policy    = AccessPolicy(self.directory)

    async def test_missing_room_raises_not_found(self):
        with self.assertRaises(NotFound):
            await self.policy.can_access("yok", BOB.id)

    async def test_host_always_allowed(self):
        self.assertTrue(await self.policy.can_access("private-room", ALICE.id))

    async def test_public_room_allows_anyone(self):
        self.assertTrue(await self.policy.can_access("public-room", BOB.id))

    async def test_private_room_requires_active_participation(self):
        self.assertFalse(await self.policy.can_access("private-room", BOB.id))

        await self.directory.add_participant("private-room", BOB.id)
        self.assertTrue(await self.policy.can_access("private-room", BOB.id))

        await self.directory.remove_participant("private-room", BOB.id)
        self.assertFalse(await self.policy.can_access("private-room", BOB.id))

    async def test_ensure_access_raises_access_denied(self):
        with self.assertRaises(AccessDenied):
            await self.policy.ensure_access("private-room", BOB.id)

    async def test_directory_outage_is_upstream_unavailable(self):
        with patch.object(self.directory, "find_room_by_id", AsyncMock(side_effect=ConnectionError("dizin yok"))):
            with self.assertRaises(UpstreamUnavailable) as ctx:
                await self.policy.can_access("public-room", BOB.id)

        self.assertEqual(ctx.exception.message, "Oda dizinine ulaşılamıyor")

        await self.directory.add_participant("private-room", BOB.id)
        with patch.object(self.directory, "find_participation", AsyncMock(side_effect=TimeoutError())):
            with self.assertRaises(UpstreamUnavailable):
                await self.policy.ensure_access("private-room", BOB.id)

    async def test_ensure_host(self):
        self.assertEqual((await self.policy.ensure_host("private-room", ALICE.id)).id, "private-room")
        with self.assertRaises(AccessDenied):
            await self.policy.ensure_host("private-room", BOB.id)

if __name__ == "__main__":
    unittest.main(verbosity=2)
