import datetime
import io
import logging
import pathlib

import pytest

LOG_DIR = pathlib.Path(__file__).parent / "test-logs"


@pytest.hookimpl(hookwrapper=True)
def pytest_runtest_makereport(item, call):
    # Attach the TestReport to the item so fixtures can see the outcome in teardown.
    outcome = yield
    rep = outcome.get_result()
    setattr(item, "rep_" + rep.when, rep)


@pytest.fixture(autouse=True)
def capture_test_logs(request):
    """Capture intersect2d logging for each test into an in-memory buffer and
    write it to a file only when the test fails.

    Successful runs stay quiet while the DEBUG trace of the solvers (restarts,
    rejected parameters, degenerate inputs) is kept for failing ones.
    """
    pkg = logging.getLogger("intersect2d")
    buf = io.StringIO()
    handler = logging.StreamHandler(buf)
    handler.setLevel(logging.DEBUG)
    handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s"))
    prev_level = pkg.level
    pkg.addHandler(handler)
    pkg.setLevel(logging.DEBUG)
    try:
        yield buf
    finally:
        pkg.removeHandler(handler)
        pkg.setLevel(prev_level)
        rep = getattr(request.node, "rep_call", None)
        if rep is not None and rep.outcome == "failed":
            nodeid = request.node.nodeid.replace("::", "__").replace("/", "_")
            ts = datetime.datetime.now().strftime("%Y%m%dT%H%M%S")
            LOG_DIR.mkdir(exist_ok=True)
            fname = LOG_DIR / "{}__{}.log".format(nodeid, ts)
            with open(fname, "w", encoding="utf-8") as f:
                f.write("=== Test: {}\n".format(request.node.nodeid))
                f.write("=== Timestamp: {}\n\n".format(ts))
                f.write(buf.getvalue())
