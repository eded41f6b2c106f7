# conftest.py
from pathlib import Path
import pytest

PRM_FIXTURE_DIR = Path(__file__).resolve().parent / "tests" / "fixtures" / "prm"


def pytest_addoption(parser):
    parser.addoption("--run-big-tests", action="store_true", default=False,
                     help="run the dense pressure-temperature sweeps marked big_test")


def pytest_collection_modifyitems(config, items):
    # big_test sweeps only run on request
    if config.getoption("--run-big-tests"):
        return
    skip_marker = pytest.mark.skip(reason="Skipped because --run-big-tests is not given.")
    for item in items:
        if "big_test" in item.keywords:
            item.add_marker(skip_marker)


@pytest.fixture
def prm_fixture_dir():
    '''
    Directory of the deal.ii parameter files used by the tests
    '''
    return PRM_FIXTURE_DIR
