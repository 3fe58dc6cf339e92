from pytest_socket import disable_socket

def pytest_runtest_setup():
    """
    Runs before every test.
    Network access is disabled: the backend, Supabase and the dashboard API
    are always mocked, and FastAPI's TestClient talks to the app in-process.
    Unix sockets stay allowed for the asyncio event loop's self-pipe.
    """
    disable_socket(allow_unix_socket=True)
