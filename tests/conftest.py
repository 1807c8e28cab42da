import sys
from pathlib import Path
from textwrap import dedent

import pytest

sys.path.insert(0, str(Path(__file__).resolve().parents[1] / "src"))


SAMPLE_CSV = dedent(
    """\
    eBay Sales Report May 2025
    DATE,ITEM,SELL PRICE,BUY PRICE,PROFIT,ROI
    17. Mai 2025,Widget A,"12,50",8.00,"3,10",38.75%
    17. Mai 2025,Widget B,9.99,5.00,4.99,99.8
    18. Mai 2025,Widget C,55.00,60.00,-5.00,-8.33
    18. Mai 2025,Broken,0,5.00,1.00,20
    19. Mai 2025,Gadget,25.00,10.00,15.00,5000
    ,Missing price,,5.00,1.00,10
    """
)


@pytest.fixture
def sample_csv() -> str:
    return SAMPLE_CSV


@pytest.fixture
def sample_csv_path(tmp_path: Path) -> Path:
    path = tmp_path / "may_sales.csv"
    path.write_text(SAMPLE_CSV, encoding="utf-8")
    return path
