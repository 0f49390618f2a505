# test/conftest.py
import pytest

from surfwindow.io.sun import load_sky


@pytest.fixture(scope="session")
def sky():
    # The ephemeris is fetched over the network the first time it is needed.
    try:
        return load_sky()
    except OSError as e:
        pytest.skip(f"skyfield ephemeris unavailable: {e}")
