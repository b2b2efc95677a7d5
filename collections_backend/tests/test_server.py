import asyncio
import threading
import unittest
from types import SimpleNamespace
from unittest.mock import MagicMock, patch

from collections_backend import server
from collections_backend.config import Settings
from collections_backend.server import FatalErrorGuard


class FatalErrorGuardTests(unittest.TestCase):
    def setUp(self):
        self.server = SimpleNamespace(should_exit=False)
        self.guard = FatalErrorGuard(self.server)

    def test_loop_exception_stops_server(self):
        with self.assertLogs("collections_backend.server", level="ERROR") as logs:
            self.guard.handle_loop_exception(
                None,
                {
                    "message": "Task exception was never retrieved",
                    "exception": RuntimeError("boom"),
                },
            )
        self.assertTrue(self.server.should_exit)
        self.assertEqual(self.guard.exit_code, 1)
        self.assertIn("Task exception was never retrieved", "\n".join(logs.output))

    def test_thread_exception_stops_server(self):
        exc = ValueError("bad state")
        args = SimpleNamespace(
            exc_type=ValueError,
            exc_value=exc,
            exc_traceback=None,
            thread=SimpleNamespace(name="worker-1"),
        )
        with self.assertLogs("collections_backend.server", level="ERROR") as logs:
            self.guard.handle_thread_exception(args)
        self.assertTrue(self.server.should_exit)
        self.assertEqual(self.guard.exit_code, 1)
        self.assertIn("worker-1", "\n".join(logs.output))

    def test_install_hooks_into_running_loop(self):
        original_hook = threading.excepthook
        self.addCleanup(setattr, threading, "excepthook", original_hook)

        async def scenario():
            self.guard.install()
            loop = asyncio.get_running_loop()
            self.assertEqual(loop.get_exception_handler(), self.guard.handle_loop_exception)
            loop.call_exception_handler({"message": "stray failure"})

        with self.assertLogs("collections_backend.server", level="ERROR"):
            asyncio.run(scenario())
        self.assertEqual(threading.excepthook, self.guard.handle_thread_exception)
        self.assertTrue(self.server.should_exit)

    def test_healthy_run_keeps_zero_exit_code(self):
        self.assertEqual(self.guard.exit_code, 0)
        self.assertFalse(self.server.should_exit)


class MainTests(unittest.TestCase):
    def setUp(self):
        original_hook = threading.excepthook
        self.addCleanup(setattr, threading, "excepthook", original_hook)
        self.settings = Settings(_env_file=None)

    def run_main(self, serve):
        fake_server = MagicMock()
        fake_server.serve = serve
        fake_server.started = False
        with patch.object(server, "get_settings", return_value=self.settings), \
                patch.object(server, "create_app", return_value=MagicMock()), \
                patch.object(server.uvicorn, "Server", return_value=fake_server), \
                patch.object(server.uvicorn, "Config"):
            return server.main()

    def test_failed_startup_exits_with_status_one(self):
        async def serve():
            # uvicorn aborts a failed lifespan startup this way.
            raise SystemExit(3)

        with self.assertLogs("collections_backend.server", level="ERROR"):
            self.assertEqual(self.run_main(serve), 1)

    def test_server_that_never_started_exits_with_status_one(self):
        async def serve():
            return None

        with self.assertLogs("collections_backend.server", level="ERROR"):
            self.assertEqual(self.run_main(serve), 1)


if __name__ == "__main__":
    unittest.main()
