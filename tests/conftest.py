"""
Pytest configuration and fixtures

Shared storm-event fixtures for SIRE tests.
"""

import pytest
import matplotlib

matplotlib.use("Agg")

from sire.models import StormEvent


def make_event(event_id=0, event_type="TORNADO", fatalities=0, injuries=0,
               prop_dmg=0, prop_dmg_exp="", crop_dmg=0, crop_dmg_exp=""):
    return StormEvent(
        event_id=event_id,
        event_type=event_type,
        fatalities=fatalities,
        injuries=injuries,
        prop_dmg=prop_dmg,
        prop_dmg_exp=prop_dmg_exp,
        crop_dmg=crop_dmg,
        crop_dmg_exp=crop_dmg_exp,
    )


@pytest.fixture
def tornado_flood():
    """The two-record example: Tornado dominates health, Flood dominates damage."""
    return [
        make_event(0, "Tornado", 5, 10, 25, "K", 0, ""),
        make_event(1, "Flood", 1, 2, 3, "M", 1, "K"),
    ]


@pytest.fixture
def storm_batch():
    """A small mixed batch with repeated labels and no ties in any metric."""
    return [
        make_event(0, "TORNADO", 10, 100, 2.5, "M", 0, ""),
        make_event(1, "FLOOD", 2, 5, 1, "B", 10, "M"),
        make_event(2, "TORNADO", 3, 20, 500, "K", 5, "K"),
        make_event(3, "HAIL", 0, 1, 50, "K", 2, "M"),
        make_event(4, "EXCESSIVE HEAT", 25, 40, 0, "", 0, ""),
        make_event(5, "FLOOD", 1, 0, 7, "8", 0, "?"),
        make_event(6, "TSTM WIND", 4, 30, 80, "k", 1, "k"),
        make_event(7, "LIGHTNING", 6, 12, 3, "h", 0, "-"),
    ]


STORM_CSV = """STATE__,BGN_DATE,STATE,EVTYPE,FATALITIES,INJURIES,PROPDMG,PROPDMGEXP,CROPDMG,CROPDMGEXP
1,4/18/1950 0:00:00,AL,TORNADO,0,15,25,K,0,
1,4/18/1950 0:00:00,AL,TORNADO,2,0,2.5,K,0,
5,1/1/1995 0:00:00,AR,FLOOD,1,2,3,M,1,K
5,1/2/1995 0:00:00,AR,TSTM WIND,0,0,5,5,0,?
6,1/3/1995 0:00:00,CA,HAIL,,1,abc,K,3,X
"""


@pytest.fixture
def storm_csv(tmp_path):
    p = tmp_path / "StormData.csv"
    p.write_text(STORM_CSV, encoding="utf-8")
    return str(p)
