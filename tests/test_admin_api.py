# tests/test_admin_api.py
import unittest
from unittest.mock import Mock
import sys
import os

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from fastapi.testclient import TestClient

from admin_portal.backend.main import create_app
from horde.settings import default_config

STATUS = {
    "started": True,
    "time_of_day": 20.5,
    "day": 3,
    "days_since_last_spawn": 0,
    "waves": [{
        "name": "Default Wave", "state": "ACTIVE", "spawned": True, "live": 50, "population": 50,
        "submerged": 0, "spawn_time": 19.8, "destroy_time": 7.3, "days_since_spawned": 0,
    }],
    "sites": {"airfield": 5},
}

class TestAdminApi(unittest.TestCase):
    def setUp(self):
        self.mock_lifecycle = Mock()
        self.mock_lifecycle.started = True
        self.mock_lifecycle.status.return_value = STATUS
        self.mock_lifecycle.config = default_config()
        self.mock_lifecycle.despawn_all.return_value = {"waves": 50, "sites": 5}
        self.client = TestClient(create_app(self.mock_lifecycle))

    def test_health_check(self):
        response = self.client.get("/")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["status"], "online")

    def test_status(self):
        response = self.client.get("/horde/status")
        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertEqual(body["day"], 3)
        self.assertEqual(body["waves"][0]["live"], 50)
        self.assertEqual(body["sites"], {"airfield": 5})

    def test_force_spawn(self):
        response = self.client.post("/horde/forcespawn")
        self.assertEqual(response.status_code, 200)
        self.mock_lifecycle.force_spawn.assert_called_once_with()

    def test_despawn(self):
        response = self.client.post("/horde/despawn")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json(), {"waves": 50, "sites": 5, "total": 55})
        self.mock_lifecycle.despawn_all.assert_called_once_with()

    def test_unknown_wave_is_404(self):
        self.mock_lifecycle.scheduler.get_wave.return_value = None
        response = self.client.get("/horde/waves/Nope")
        self.assertEqual(response.status_code, 404)

    def test_wave_status(self):
        wave = Mock()
        wave.status.return_value = STATUS["waves"][0]
        self.mock_lifecycle.scheduler.get_wave.return_value = wave
        response = self.client.get("/horde/waves/Default Wave")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["population"], 50)

    def test_config_uses_file_keys(self):
        response = self.client.get("/horde/config")
        self.assertEqual(response.status_code, 200)
        self.assertIn("Spawn Waves", response.json())

    def test_without_lifecycle_is_503(self):
        client = TestClient(create_app())
        self.assertEqual(client.get("/").json()["status"], "idle")
        self.assertEqual(client.get("/horde/status").status_code, 503)

if __name__ == '__main__':
    unittest.main()
