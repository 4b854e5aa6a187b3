"""
Tests for SkyWalkerClient: login flow, site selection, registration and
locating tags, including the topology reload on unknown receivers.
"""

from __future__ import annotations

import unittest
import uuid
from unittest.mock import AsyncMock, patch

from skywalker.client import SkyWalkerClient
from skywalker.errors import ErrorType, HttpStatusError, NoSiteSelectedError
from skywalker.models import ResolvedPosition
from skywalker.onboarding import OnboardingEnvelope
from skywalker.result import Result

from .test_common import ENDPOINT, RECEIVERS_JSON, json_request, make_client, make_receiver, make_token


class TestLogin(unittest.IsolatedAsyncioTestCase):

    async def test_login_installs_token(self):
        client = make_client(logged_in=False, site_id=None)
        with patch("skywalker.api.auth.make_request", new=AsyncMock(return_value="abc123")):
            result = await client.login(ENDPOINT, "alice", "secret")
        self.assertTrue(result.is_success)
        self.assertEqual(client.session.token, make_token("abc123"))

    async def test_failed_login_keeps_previous_token(self):
        client = make_client()
        previous = client.session.token
        with patch("skywalker.api.auth.make_request", new=AsyncMock(side_effect=HttpStatusError(401))):
            result = await client.login(ENDPOINT, "alice", "wrong")
        self.assertIs(result.error, ErrorType.INVALID_CREDENTIALS)
        self.assertIs(client.session.token, previous)

    async def test_login_from_config(self):
        client = make_client(logged_in=False, username="bob", password="pw")
        mock_request = AsyncMock(return_value="tok")
        with patch("skywalker.api.auth.make_request", new=mock_request):
            await client.login_from_config()
        self.assertEqual(mock_request.call_args.kwargs["payload"], {"login": "bob", "password": "pw"})
        self.assertEqual(mock_request.call_args.kwargs["max_attempts"], client.config.max_attempts)

    async def test_connect_uses_envelope(self):
        client = SkyWalkerClient()
        envelope = OnboardingEnvelope(url="https://other.example.com", username="u", password=None)
        mock_request = AsyncMock(return_value="tok")
        with patch("skywalker.api.auth.make_request", new=mock_request):
            result = await client.connect(envelope)
        self.assertEqual(result.value.endpoint, "https://other.example.com")
        self.assertEqual(mock_request.call_args.kwargs["payload"], {"login": "u", "password": ""})

    async def test_logout_forgets_token_and_site(self):
        client = make_client()
        await client.logout()
        self.assertFalse(client.session.has_token)
        self.assertIsNone(client.site)

    async def test_is_reachable_probes_session_endpoint(self):
        client = make_client()
        with patch("skywalker.client.check_server_availability", new=AsyncMock(return_value=True)) as probe:
            self.assertTrue(await client.is_reachable())
        probe.assert_awaited_once_with(ENDPOINT)


class TestSiteOperations(unittest.IsolatedAsyncioTestCase):

    async def test_site_calls_require_selection(self):
        client = make_client(site_id=None)
        with self.assertRaises(NoSiteSelectedError):
            await client.load_receivers()
        with self.assertRaises(NoSiteSelectedError):
            await client.locate(1)

    async def test_select_site_uses_configured_display_name(self):
        client = make_client(site_id=None, display_name="Alice")
        site = client.select_site(5)
        self.assertEqual(site.own_name, "Alice")
        self.assertIsNone(site.receivers)

    async def test_register_beacon_marks_own_name(self):
        client = make_client()
        with patch("skywalker.api.tags.make_request", new=json_request({"major": 3, "minor": 4})):
            result = await client.register_beacon("Phone 7")
        self.assertEqual(result.value.namespace, client.beacon_namespace)
        self.assertEqual(client.site.own_name, "Phone 7")

    async def test_configured_namespace_reaches_registration_as_uuid(self):
        client = make_client(beacon_namespace="f7826da6-4fa2-4e98-8024-bc5b71e0893e")
        mock_register = AsyncMock(return_value=Result.no_update())
        with patch("skywalker.client.register_beacon", new=mock_register):
            await client.register_beacon("Phone 7")
        namespace = mock_register.await_args.args[3]
        self.assertEqual(namespace, uuid.UUID("F7826DA6-4FA2-4E98-8024-BC5B71E0893E"))

    async def test_load_receivers_updates_site(self):
        client = make_client()
        with patch("skywalker.api.receivers.make_request", new=json_request(RECEIVERS_JSON)):
            await client.load_receivers()
        self.assertEqual(len(client.site.receivers), 2)


class TestLocate(unittest.IsolatedAsyncioTestCase):

    async def test_resolves_against_loaded_topology(self):
        client = make_client()
        client.site.replace_receivers((make_receiver(1), make_receiver(2, 10, 10, 1)))
        with patch("skywalker.client.fetch_nearest_receiver", new=AsyncMock(return_value=Result.success(2))):
            result = await client.locate(11)
        self.assertEqual(result.value, ResolvedPosition(2, 10, 10, 1))

    async def test_no_update_passes_through(self):
        client = make_client()
        with patch("skywalker.client.fetch_nearest_receiver", new=AsyncMock(return_value=Result.no_update())):
            result = await client.locate(11)
        self.assertTrue(result.is_no_update)

    async def test_error_passes_through(self):
        client = make_client()
        failure = Result.failure(ErrorType.CONNECTIVITY_ERROR)
        with patch("skywalker.client.fetch_nearest_receiver", new=AsyncMock(return_value=failure)):
            result = await client.locate(11)
        self.assertIs(result.error, ErrorType.CONNECTIVITY_ERROR)

    async def test_unknown_receiver_triggers_reload(self):
        client = make_client()
        client.site.replace_receivers((make_receiver(1),))
        with patch("skywalker.client.fetch_nearest_receiver", new=AsyncMock(return_value=Result.success(2))), \
             patch("skywalker.api.receivers.make_request", new=json_request(RECEIVERS_JSON)) as reload:
            result = await client.locate(11)
        reload.assert_awaited_once()
        self.assertEqual(result.value, ResolvedPosition(2, 5.0, 5.0, 1))

    async def test_still_unknown_after_reload_is_not_found(self):
        client = make_client()
        with patch("skywalker.client.fetch_nearest_receiver", new=AsyncMock(return_value=Result.success(99))), \
             patch("skywalker.api.receivers.make_request", new=json_request(RECEIVERS_JSON)):
            result = await client.locate(11)
        self.assertTrue(result.is_not_found)
        self.assertIsNone(result.error)

    async def test_failed_reload_reports_error(self):
        client = make_client()
        with patch("skywalker.client.fetch_nearest_receiver", new=AsyncMock(return_value=Result.success(2))), \
             patch("skywalker.api.receivers.make_request", new=AsyncMock(side_effect=HttpStatusError(500))):
            result = await client.locate(11)
        self.assertIs(result.error, ErrorType.SERVER_ERROR)
