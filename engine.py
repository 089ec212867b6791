"""Pure exam constants: scoring, subjects, TYT/AYT sections, timer defaults. No UI."""
# Scoring: correct +1.0, incorrect -0.25 (4 wrong cancel 1 right)
# Net = correct - incorrect / 4

INCORRECT_DIVISOR = 4

# Tables in Supabase
STUDY_TABLE_NAME = "study_sessions"
DENEME_TABLE_NAME = "deneme_results"

# Mock exam sections: (key, label, max questions, group)
TYT_SECTIONS = [
    ("turkce", "Türkçe", 40, "TYT"),
    ("sosyal", "Sosyal Bilimler", 20, "TYT"),
    ("matematik", "Temel Matematik", 40, "TYT"),
    ("fen", "Fen Bilimleri", 20, "TYT"),
]

AYT_SECTIONS = [
    ("matematik_ayt", "Matematik", 40, "Sayısal"),
    ("fizik", "Fizik", 14, "Sayısal"),
    ("kimya", "Kimya", 13, "Sayısal"),
    ("biyoloji", "Biyoloji", 13, "Sayısal"),
    ("edebiyat", "Türk Dili ve Edebiyatı", 24, "Sözel / EA"),
    ("tarih1", "Tarih-1", 10, "Sözel / EA"),
    ("cografya1", "Coğrafya-1", 6, "Sözel / EA"),
    ("tarih2", "Tarih-2", 11, "Sözel"),
    ("cografya2", "Coğrafya-2", 11, "Sözel"),
    ("felsefe", "Felsefe Grubu", 12, "Sözel"),
]

# Pomodoro
FOCUS_MINUTES = 25
BREAK_MINUTES = 5

# YKS 2026 (June 2026 estimate), Istanbul time
EXAM_DATE = "2026-06-20T10:00:00+03:00"

# AI coach
SUMMARY_ENTRY_LIMIT = 50
MOCK_ADVICE = "Henüz yeterli veri yok. Biraz soru çözmeye başla, sana özel tavsiyeler vereceğim!"
