# =============================================================================
# maintenance_core/data/constants.py
# Reference Data: Status Enumerations, Default Settings, Seed Budget Plan
# =============================================================================

from __future__ import annotations
import copy
from enum import Enum
from typing import Any, Dict, List, Tuple


class JobStatus(str, Enum):
    """Job ticket status (values are the stored Thai labels)."""
    IN_PROGRESS = "ดำเนินการ"
    WAITING_INSPECTION = "รอตรวจรับ"
    FINISHED = "ปิดงานแล้ว"
    CANCELLED = "ยกเลิก"
    UNREPAIRABLE = "ซ่อมไม่ได้"


# Legacy labels still found in older rows
LEGACY_STATUS_MAP = {
    "รอดำเนินการ": JobStatus.IN_PROGRESS.value,
    "เสร็จสิ้น": JobStatus.FINISHED.value,
}


class RepairGroup(str, Enum):
    INTERNAL = "ซ่อมภายใน"
    EXTERNAL = "ส่งซ่อมภายนอก"
    BUY_PARTS = "ซื้ออุปกรณ์"
    QUALITY_PROJECT = "งานโครงการคุณภาพ"
    CANNOT_FIX = "ซ่อมไม่ได้"
    CANCEL = "ยกเลิกงานซ่อม"


class UserRole(str, Enum):
    TECHNICIAN = "TECHNICIAN"
    HEAD = "HEAD"
    DEPT_ADMIN = "DEPT_ADMIN"
    SYSTEM_ADMIN = "SYSTEM_ADMIN"


SETTINGS_ID = 1
DEFAULT_DIVISION = "MTN"
DEFAULT_JOB_PREFIX = "JOB"
DEFAULT_JOB_TYPE = "ซ่อมทั่วไป/เซอร์วิส"
BUDDHIST_ERA_OFFSET = 543
UNSPECIFIED_CATEGORY = "ไม่ระบุ"

# (department, factory group)
_DEPARTMENT_GROUPS: List[Tuple[str, str]] = [
    ("แผนกผสมกากเชื้อเพลิงของแข็ง 1 (RDF1)", "โรงงาน 101"),
    ("แผนกผสมกากเชื้อเพลิงของแข็ง 2 (RDF2)", "โรงงาน 101"),
    ("แผนกเตรียมวัตถุดิบและ N5 (SMP)", "โรงงาน 101"),
    ("แผนกปรับปรุงคุณภาพกาก เตรียมกาก (SPE)", "โรงงาน 101"),
    ("แผนกปรับปรุงคุณภาพกาก บำบัดกาก (STA)", "โรงงาน 101"),
    ("แผนกกำจัดกากปนเปื้อน (HAZ)", "โรงงาน 106"),
    ("แผนกกำจัดกาทั่วไป (NON)", "โรงงาน 106"),
    ("แผนกระบบปรับปรุงคุณภาพน้ำ HAZ (PLH)", "โรงงาน 106"),
    ("แผนกระบบปรับปรุงคุณภาพน้ำ NON (PLN)", "โรงงาน 106"),
    ("แผนกวิชาการสิ่งแวดล้อมและความปลอดภัย (ENV)", "โรงงาน 106"),
    ("แผนกบริหารทรัพยากรบุคคล (HRM)", "โรงงาน 106"),
    ("แผนกผสมกากเชื้อเพลิงของเหลว (LBL)", "โรงงาน 101"),
    ("แผนกจัดการรถขนส่งและภาชนะบรรจุ (CON)", "โรงงาน 101"),
    ("แผนกวิศวกรรมซ่อมบำรุง (MTN)", "โรงงาน 106"),
    ("แผนกสื่อสารองค์กร (COC)", "โรงงาน 106"),
    ("แผนกปฏิบัติการ (OPE)", "โรงงาน 106"),
    ("แผนกตรวจสอบคุณภาพ (QCI)", "โรงงาน 106"),
    ("แผนกวางแผนการผลิตและขาย (PPS)", "โรงงาน 106"),
    ("แผนกโครงการพิเศษฯ (PRO)", "โรงงาน 106"),
    ("แผนกธุรการขนส่ง (ADD)", "โรงงาน 106"),
    ("แผนกซ่อมบำรุง RDF (MER)", "โรงงาน 101"),
    ("แผนกวิศวกรรมยานยนต์ (MOT)", "โรงงาน 106"),
    ("แผนกบริหารสินทรัพย์ (ASM)", "โรงงาน 106"),
    ("แผนกปฏิบัติการวิเคราะห์ (LAB)", "โรงงาน 106"),
    ("แผนกข้อมูลตรวจรับกาก (CIW)", "โรงงาน 106"),
    ("แผนกดรอส (DROSS)", "โรงงาน 101"),
    ("แผนกก่อสร้าง (CST)", "โรงงาน 106"),
    ("แผนกเทคโนโลยีสารสนเทศ (IT)", "โรงงาน 106"),
    ("แผนกวิจัยและพัฒนา (RD)", "โรงงาน 106"),
]

DEPARTMENTS: List[str] = [dept for dept, _ in _DEPARTMENT_GROUPS]

_TECHNICIAN_CATEGORIES = [
    "ไฟฟ้า",
    "ประปา",
    "เครื่องปรับอากาศ (แอร์)",
    "ซ่อมทั่วไป/เซอร์วิส",
    "ก่อสร้าง/โครงสร้าง",
    "ยานยนต์",
]

_PM_TYPES = [
    "หม้อแปลงไฟฟ้า", "ตู้ควบคุมหม้อแปลงไฟฟ้า", "เสาล่อฟ้า", "ตู้ควบคุมเครื่องจักร",
    "ปั๊มน้ำดี", "ปั๊มน้ำเสีย", "ปั๊มลม", "มอเตอร์+ปั๊ม", "มอเตอร์", "เครื่องกำเนิดไฟฟ้า",
    "เครื่องซีลผ้า", "ระบบบำบัดอากาศ", "เครื่องเติมอากาศ", "เครื่องดูดอากาศ", "เครื่องปรับอากาศ",
    "รถโฟคลิฟท์", "รถคีบไฮดรอลิค", "รถสิบล้อ", "รถ Roll Off", "รถแทรกเตอร์", "รถบดถนน",
    "รถน้ำ/รถดับเพลิง", "รถบรรทุกกระเช้าไฟฟ้า", "รถ Vaccum", "เครื่องยนต์เบนซิน",
    "เครื่องยนต์ดีเซล", "พญานาคสูบน้ำซิ่ง", "ปั๊มสูบน้ำเครื่องยนต์", "ปั๊มลมเครื่องยนต์",
    "เครื่องตัดหญ้าเบนซิน", "กะบะ 4 ประตู", "กะบะแค๊ป", "รถยนต์ 4 ประตู", "รถตู้",
    "รถจักรยานยนต์", "รถสามล้อ",
]

_DEFAULT_SETTINGS: Dict[str, Any] = {
    "id": SETTINGS_ID,
    "departments": DEPARTMENTS,
    "technicianPositions": ["ช่าง", "แอดมิน", "หัวหน้าแผนก"],
    "technicianCategories": _TECHNICIAN_CATEGORIES,
    "expenseCategories": [
        "ค่าซ่อมบำรุงตามรายการบัญชีเครื่องมือเครื่องจักร",
        "ค่าซ่อมทั่วไปตามใบแจ้งซ่อม-ซ่อมภายใน",
        "ค่าซ่อมทั่วไปตามใบแจ้งซ่อม-ซ่อมภายนอก",
        "ค่าซ่อมเครื่องปรับอากาศ (แอร์)",
        "ค่าซ่อมบำรุงเครื่องจักรเคลื่อนที่ รถบด รถน้ำ รถดับเพลิง รถไถ",
        "ค่าซ่อมปั๊มสูบน้ำ/เครื่องเจน",
        "ค่าซ่อมรถยนต์ส่วนกลาง/โครงการพิเศษ",
        "ค่าซ่อมรถจักรยานยนต์/รถสามล้อ",
    ],
    "companies": ["BWG", "BG", "BME", "BWT", "BWC", "PF"],
    "themeColor": "INDIGO",
    "idMappings": [
        {"category": "ยานยนต์", "prefix": "MOT"},
        {"category": "ไฟฟ้า", "prefix": "MTN"},
        {"category": "ประปา", "prefix": "MTN"},
        {"category": "เครื่องปรับอากาศ (แอร์)", "prefix": "MTN"},
        {"category": "ซ่อมทั่วไป/เซอร์วิส", "prefix": "MTN"},
        {"category": "ก่อสร้าง/โครงสร้าง", "prefix": "MTN"},
    ],
    "pmTypes": _PM_TYPES,
    "budgetCategories": [
        "หมวด 1 อุปกรณ์เครื่องจักร",
        "หมวด 2 สารเคมี",
        "หมวด 3 ค่านำมันเชื้อเพลิง",
        "หมวด 4 อุปกรณ์ PPE",
        "หมวด 5 อุปกรณ์สำนักงาน",
        "หมวด 6 การปฏิบัติตามกฎหมายและข้อกำหนด",
        "หมวด 7 ปรับปรุง-พัฒนาพื้นที่ปฏิบัติงาน",
    ],
    "repairGroups": [group.value for group in RepairGroup],
    "divisionMappings": {
        category: ("MOT" if category == "ยานยนต์" else "MTN")
        for category in _TECHNICIAN_CATEGORIES
    },
    "divisions": [{"name": "ซ่อมบำรุง", "code": "MTN"}, {"name": "ยานยนต์", "code": "MOT"}],
    "factoryGroups": ["โรงงาน 101", "โรงงาน 106"],
    "departmentGroupMappings": dict(_DEPARTMENT_GROUPS),
}


def default_settings() -> Dict[str, Any]:
    """Fresh copy of the built-in AppSettings."""
    return copy.deepcopy(_DEFAULT_SETTINGS)


def distribute(total: int, months: int = 12) -> List[int]:
    """Spread a yearly amount evenly, putting the remainder in the last month."""
    avg, rem = divmod(total, months)
    plan = [avg] * months
    plan[-1] += rem
    return plan


# Budget plan for Buddhist year 2569: (id, category, item code, name, total)
SEED_BUDGET_YEAR = 2569

_SEED_BUDGET_ROWS: List[Tuple[str, str, str, str, int]] = [
    ("seed-1-1", "หมวด 1 อุปกรณ์เครื่องจักร", "1.1", "ค่าบำรุงรักษาและซ่อมแซมเครื่องมือ เครื่องใช้ในแผนก และกรณีชำรุดสูญหาย", 240000),
    ("seed-1-2", "หมวด 1 อุปกรณ์เครื่องจักร", "1.2", "อุปกรณ์เครื่องมือ ซื้อเพิ่มเติมเหมาะกับประเภทงาน", 240000),
    ("seed-1-3", "หมวด 1 อุปกรณ์เครื่องจักร", "1.3", "ค่าบำรุงรักษา/ซ่อมแซม/ระบบน้ำใช้/งานซ่อมทั่วไป เชื่อมและอะไหล่ ที่ใช้งานซ่อมทั้งศูนย์", 240000),
    ("seed-1-4", "หมวด 1 อุปกรณ์เครื่องจักร", "1.4", "ค่าบำรุงรักษา/ซ่อมแซม/ระบบไฟฟ้า ภายในแผนก", 100000),
    ("seed-1-5", "หมวด 1 อุปกรณ์เครื่องจักร", "1.5", "ค่าบำรุงรักษา/ซ่อมแซม/เครื่องปรับอากาศในศูนย์ (การล้าง/การซ่อมตามแผงประจำปี)", 90000),
    ("seed-1-6", "หมวด 1 อุปกรณ์เครื่องจักร", "1.6", "ค่าบำรุงรักษา/ซ่อมแซม/ปรับปรุงหม้อแปลงไฟฟ้าภายในศูนย์", 80000),
    ("seed-1-7", "หมวด 1 อุปกรณ์เครื่องจักร", "1.7", "ค่าบำรุงรักษา/การสอบเทียบเครื่องมือ เมกโอมท์/วัดอุณหภูมิ (กุมภาพันธ์)", 10000),
    ("seed-1-8", "หมวด 1 อุปกรณ์เครื่องจักร", "1.8", "ค่าบำรุงรักษาและซ่อมแซมรถจักรยานยนต์/รถสามล้อ/รถกระเช้า ซ่อมภายนอก", 150000),
    ("seed-1-9", "หมวด 1 อุปกรณ์เครื่องจักร", "1.9", "ค่าซื้ออะไหล่ซ่อมแซมรถจักรยานยนต์/รถสามล้อ/รถกระเช้า รวมถึงอะไหล่ชิ้นเล็กที่อยู่ในสโตร์", 144000),
    ("seed-1-10", "หมวด 1 อุปกรณ์เครื่องจักร", "1.10", "ค่าซื้อยางรถสิบล้อใหม่ ยาง % (รถทอย รถน้ำ รถดับเพลิง) พร้อมกะทะล้อ", 120000),
    ("seed-1-11", "หมวด 1 อุปกรณ์เครื่องจักร", "1.11", "ค่าปะยางเครื่องจักรเคลื่อนที่และรถยนต์ที่ใช้ในศูนย์ (รถทอย รถน้ำ รถดับเพลิง รถกระบะ)", 96000),
    ("seed-1-12", "หมวด 1 อุปกรณ์เครื่องจักร", "1.12", "ค่าบำรุกรักษาอุปกรณ์คอมพิวเตอร์ สำนักงาน/เครือข่ายIT /ซื้อทดแทน", 30000),
    ("seed-1-13", "หมวด 1 อุปกรณ์เครื่องจักร", "1.13", "ซื้อรถจักรยานยนต์ ทดแทนที่แผนกก่อสร้างนำไปใช้งาน 1 คัน", 42000),
    ("seed-1-14", "หมวด 1 อุปกรณ์เครื่องจักร", "1.14", "ซื้อรถสามล้อแชมป์ สำหรับงานซ่อมภายนอกแผนกและล้างเครื่องปรับอากาศ", 80000),
    ("seed-1-15", "หมวด 1 อุปกรณ์เครื่องจักร", "1.15", "ซื้อเครื่องปรับอากาศ ทดแทนของเดิมที่ชำรุด 2 เครื่อง ห้องพักช่าง", 50000),
    ("seed-2-1", "หมวด 2 สารเคมี", "2.1", "ทินเนอร์ / LPG / CO2 /กาว 3K ที่ใช้ในการซ่อมภายในศูนย์", 30000),
    ("seed-3-1", "หมวด 3 ค่านำมันเชื้อเพลิง", "3.1", "ค่าน้ำมันเชื้อเพลิง เบนซิน รถจักรยานยนต์ รถสามล้อ เครื่องปั่นไฟ", 49000),
    ("seed-3-2", "หมวด 3 ค่านำมันเชื้อเพลิง", "3.2", "ค่าน้ำมันเชื้อเพลิง ดีเซล เครื่องปั่นไฟ 2 เครื่อง เครื่องยนดับเพลิง รถกระเช้า", 132000),
    ("seed-4-1", "หมวด 4 อุปกรณ์ PPE", "4.1", "อุปกรณ์", 34000),
    ("seed-5-1", "หมวด 5 อุปกรณ์สำนักงาน", "5.1", "ค่าบำรุงรักษา/ซ่อมแซมอุปกรณ์สำนักงาน (กรณีชำรุดทดแทน/ซื้อเพิ่มเติม) และเบิกใช้ในแผนก", 10000),
    ("seed-6-1", "หมวด 6 การปฏิบัติตามกฎหมายและข้อกำหนด", "6.1", "ติดตั้งป้ายเตือนและป้ายบ่งชี้ต่างๆ", 3000),
    ("seed-7-1", "หมวด 7 ปรับปรุง-พัฒนาพื้นที่ปฏิบัติงาน", "7.1", "ซ่อมหลังคาและเปลี่ยนรางน้ำฝน อาคารซ่อมบำรุงฯ", 160000),
    ("seed-7-2", "หมวด 7 ปรับปรุง-พัฒนาพื้นที่ปฏิบัติงาน", "7.2", "เปลี่ยนกันสาดบานเกล็ด ข้างอาคาร เปลี่ยนวัสดุเป็นเมทัลชีท", 120000),
    ("seed-7-3", "หมวด 7 ปรับปรุง-พัฒนาพื้นที่ปฏิบัติงาน", "7.3", "ปรับปรุงพื้นที่ห้องข้างออฟฟิศแผนกซ่อมบำรุงและยานยนต์เป็นสำนักงานช่าง ช่างมี 14 คน", 150000),
    ("seed-7-4", "หมวด 7 ปรับปรุง-พัฒนาพื้นที่ปฏิบัติงาน", "7.4", "ปรับปรุงห้องออฟฟิศแผนกซ่อมบำรุงและยานยนต์", 40000),
    ("seed-7-5", "หมวด 7 ปรับปรุง-พัฒนาพื้นที่ปฏิบัติงาน", "7.5", "ปรับปรุงพื้นที่ทำงานช่างด้านหลังอาคารซ่อมบำรุง", 300000),
    ("seed-7-6", "หมวด 7 ปรับปรุง-พัฒนาพื้นที่ปฏิบัติงาน", "7.6", "ต่อเติมห้องเก็บอุปกรณ์/เครื่องมือในอาคารซ่อมบำรุง 2 ชั้น โซนหน้าแผนก", 200000),
    ("seed-7-7", "หมวด 7 ปรับปรุง-พัฒนาพื้นที่ปฏิบัติงาน", "7.7", "ปรับปรุงห้อง Generator ที่สั่งซื้อทดแทนของเดิม ฝั่งปั๊มน้ำมัน", 200000),
    ("seed-7-8", "หมวด 7 ปรับปรุง-พัฒนาพื้นที่ปฏิบัติงาน", "7.8", "ปรับปรุงห้อง Generator ที่สั่งซื้อทดแทนของเดิม ฝั่งหลังปรับสเถียร ย้ายมาข้างซ่อมบำรุง", 150000),
]


def seed_budget_items(year: int) -> List[Dict[str, Any]]:
    """BudgetItem records for a year that ships with a seed plan, else []."""
    if year != SEED_BUDGET_YEAR:
        return []
    return [
        {
            "id": item_id,
            "year": year,
            "category": category,
            "itemCode": item_code,
            "name": name,
            "totalBudget": total,
            "monthlyPlan": distribute(total),
            "monthlyActual": [0] * 12,
        }
        for item_id, category, item_code, name, total in _SEED_BUDGET_ROWS
    ]
