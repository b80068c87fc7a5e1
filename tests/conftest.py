from datetime import datetime

import pytest

from core.data import SheetStore, set_store
from core.parsing import parse_records


HEADER = "ปี,ลำดับ,สังกัด,กลุ่มงาน,ชื่อ-สกุล,ตำแหน่ง,ผู้ประเมิน,ประเภท,หัวข้อ,Target,Actual,Gap,70,20,10,เริ่ม,สิ้นสุด,งบ,KPI"

SHEET_CSV = "\r\n".join(
    [
        HEADER,
        '2568,1,สำนักงาน,กลุ่มบริหาร,สมชาย ใจดี,นักวิชาการ,หัวหน้ากลุ่ม,ด้านความรู้ (Knowledge),"กฎหมาย, ระเบียบ",3,1,2,ศึกษางานจริง,สอนงานโดยพี่เลี้ยง,อบรมออนไลน์,มกราคม,มีนาคม,"1,500",ผ่านการทดสอบ',
        "2568,2,สำนักงาน,กลุ่มบริหาร,สมชาย ใจดี,นักวิชาการ,หัวหน้ากลุ่ม,ด้านทักษะ (Skill),Excel,4,4,0,ทำรายงาน,,อบรม,กุมภาพันธ์,มีนาคม,500,รายงานทันเวลา",
        "2568,3,สำนักงาน,กลุ่มแผน,สมหญิง รักงาน,เจ้าพนักงาน,ผอ.,ด้านสมรรถนะ (Competency),ภาวะผู้นำ,5,1,4,นำประชุม,โค้ช,สัมมนา,มกราคม,ธันวาคม,abc,",
        "2568,4,สำนักงาน,กลุ่มแผน,วิชัย มานะ,นักวิเคราะห์,ผอ.,,Excel,2,2,,,,,ไม่ทราบ,,,",
        ",,,",
        "",
    ]
)


@pytest.fixture
def sheet_csv():
    return SHEET_CSV


@pytest.fixture
def records():
    return parse_records(SHEET_CSV)


class FakeStore(SheetStore):
    def __init__(self, text):
        super().__init__()
        self.text = text
        self.calls = 0

    def refresh(self):
        self.calls += 1
        self._records = parse_records(self.text)
        self._last_updated = datetime(2025, 3, 5, 9, 30)
        return True


@pytest.fixture
def fake_store():
    store = FakeStore(SHEET_CSV)
    set_store(store)
    yield store
    set_store(None)
