"""Demo staff directory used by the CLI and local environments."""

from tsunageru.directory.models import PersonRecord, StaticDirectory

DEMO_STAFF = (
    PersonRecord(
        id="S001",
        name="佐藤 一郎",
        phonetic_name="サトウ イチロウ",
        blood_type="O+",
        history=("高血圧",),
        medications=("降圧薬",),
        allergies=("ピーナッツ",),
        physician="佐々木医院",
        emergency_contact_relation="妻",
        emergency_contact_phone="090-1234-5678",
    ),
    PersonRecord(
        id="S002",
        name="高橋 花子",
        phonetic_name="タカハシ ハナコ",
        blood_type="A+",
        history=("喘息",),
        medications=("吸入薬",),
        physician="高橋クリニック",
        emergency_contact_relation="夫",
        emergency_contact_phone="080-2345-6789",
    ),
    PersonRecord(id="S003", name="山田 太郎", phonetic_name="ヤマダ タロウ", blood_type="B+"),
    PersonRecord(id="S004", name="伊藤 次郎", phonetic_name="イトウ ジロウ", blood_type="AB+"),
    PersonRecord(id="S005", name="鈴木 三郎", phonetic_name="スズキ サブロウ", blood_type="O-"),
)

DEMO_DIRECTORY = StaticDirectory(DEMO_STAFF)
