"""
Server manager: binds and runs the main and application servers side by side.

Each server is a uvicorn instance serving on a socket bound up front, so a bind
failure surfaces before anything starts serving. Both run as tasks on the same
event loop; the manager owns signal handling and shuts both down together.
"""

import asyncio
import contextlib
import enum
import logging
import signal
import socket
from typing import List, Optional

import uvicorn
from fastapi import FastAPI

from .app import create_application_app, create_main_app
from .config import Config
from .errors import ServerError

logger = logging.getLogger(__name__)


class ServerState(enum.Enum):
    UNBOUND = "unbound"
    BOUND = "bound"
    RUNNING = "running"
    STOPPED = "stopped"
    FAILED = "failed"


class _ManagedServer(uvicorn.Server):
    """uvicorn server that leaves signals to the manager and reports startup."""

    def __init__(self, config: uvicorn.Config, listener: "Listener"):
        super().__init__(config)
        self._listener = listener

    @contextlib.contextmanager
    def capture_signals(self):
        yield

    async def startup(self, sockets: Optional[List[socket.socket]] = None) -> None:
        await super().startup(sockets=sockets)
        if self.started:
            self._listener._mark_running()


class Listener:
    """One named HTTP server: a FastAPI app, its bound socket and uvicorn instance."""

    def __init__(self, name: str, app: FastAPI, host: str, port: int, backlog: int = 2048):
        self.name = name
        self.app = app
        self.host = host
        self.port = port
        self.backlog = backlog
        self.state = ServerState.UNBOUND
        self.socket: Optional[socket.socket] = None
        self._shutdown_requested = False

        config = uvicorn.Config(
            app,
            host=host,
            port=port,
            backlog=backlog,
            lifespan="on",
            access_log=False,
            log_config=None,
        )
        self.server = _ManagedServer(config, self)

    @property
    def address(self) -> str:
        if ":" in self.host:
            return f"[{self.host}]:{self.port}"
        return f"{self.host}:{self.port}"

    def bind(self) -> None:
        """Bind and listen on host:port. OSError propagates unchanged."""
        family = socket.AF_INET6 if ":" in self.host else socket.AF_INET
        sock = socket.socket(family, socket.SOCK_STREAM)
        try:
            sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
            sock.bind((self.host, self.port))
            sock.listen(self.backlog)
        except OSError:
            sock.close()
            raise
        sock.set_inheritable(True)

        self.socket = sock
        # Port 0 binds an ephemeral port
        self.port = sock.getsockname()[1]
        self.state = ServerState.BOUND
        logger.debug(f"{self.name} server bound to {self.address}")

    def close(self) -> None:
        """Release a socket that was bound but never served."""
        if self.socket is not None:
            self.socket.close()
            self.socket = None
        if self.state is ServerState.BOUND:
            self.state = ServerState.STOPPED

    def _mark_running(self) -> None:
        self.state = ServerState.RUNNING
        logger.debug(f"{self.name} server accepting connections on {self.address}")

    def request_shutdown(self, force: bool = False) -> None:
        self._shutdown_requested = True
        self.server.should_exit = True
        if force:
            self.server.force_exit = True

    async def serve(self) -> None:
        if self.state is not ServerState.BOUND or self.socket is None:
            raise ServerError(f"{self.name} server must be bound before serving")

        try:
            await self.server.serve(sockets=[self.socket])
        except asyncio.CancelledError:
            self.state = ServerState.STOPPED
            raise
        except Exception:
            self.state = ServerState.FAILED
            raise
        finally:
            # uvicorn closes the socket on a clean shutdown but not on failure
            self.socket.close()
            self.socket = None

        if not self.server.started and not self._shutdown_requested:
            self.state = ServerState.FAILED
            raise ServerError(f"{self.name} server on {self.address} exited before it started serving")

        self.state = ServerState.STOPPED


class ServerManager:
    """Owns the configuration and runs the main and application servers."""

    def __init__(self, config: Config):
        self.config = config
        self.main = Listener("main", create_main_app(), config.bind_address, config.main_port)
        self.application = Listener(
            "application", create_application_app(), config.bind_address, config.app_port
        )
        self._shutting_down = False

    @property
    def listeners(self) -> List[Listener]:
        return [self.main, self.application]

    def shutdown(self, force: bool = False) -> None:
        """Ask both servers to stop. In-flight requests finish unless ``force`` is set."""
        self._shutting_down = True
        for listener in self.listeners:
            listener.request_shutdown(force=force)

    def _handle_signal(self, sig: signal.Signals) -> None:
        if self._shutting_down:
            logger.warning(f"Received {sig.name} again, forcing exit")
            self.shutdown(force=True)
            return
        logger.info(f"Received {sig.name}, shutting down servers")
        self.shutdown()

    def _install_signal_handlers(self, loop: asyncio.AbstractEventLoop) -> List[signal.Signals]:
        installed = []
        for sig in (signal.SIGINT, signal.SIGTERM):
            try:
                loop.add_signal_handler(sig, self._handle_signal, sig)
            except (NotImplementedError, RuntimeError):
                # Not supported on this loop or outside the main thread
                logger.debug(f"Cannot install handler for {sig.name}")
                continue
            installed.append(sig)
        return installed

    async def start(self, handle_signals: bool = True) -> None:
        """Bind both servers, run them concurrently and wait until both stop.

        A bind failure on either server raises before anything serves. If a
        running server fails, the other one is shut down gracefully and the
        failure is re-raised.
        """
        logger.info(f"Starting servers with configuration: {self.config!r}")

        self.main.bind()
        try:
            self.application.bind()
        except OSError:
            self.main.close()
            raise

        logger.info(f"Main server starting on {self.main.address}")
        logger.info(f"Application server starting on {self.application.address}")

        loop = asyncio.get_running_loop()
        installed = self._install_signal_handlers(loop) if handle_signals else []

        tasks = [
            asyncio.create_task(listener.serve(), name=f"{listener.name}-server")
            for listener in self.listeners
        ]
        try:
            done, pending = await asyncio.wait(tasks, return_when=asyncio.FIRST_EXCEPTION)
            failed = [t for t in done if not t.cancelled() and t.exception() is not None]
            if failed:
                exc = failed[0].exception()
                logger.error(f"Server error: {exc}")
                self.shutdown()
                await asyncio.gather(*pending, return_exceptions=True)
                raise exc
            logger.info("Both servers shutdown gracefully")
        finally:
            for task in tasks:
                if not task.done():
                    task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)
            for sig in installed:
                loop.remove_signal_handler(sig)
