"""
AI study coach backed by Google Gemini (google-genai).

Three prompt templates are filled with pre-aggregated statistics. The reply is
treated as opaque Markdown. Any failure turns into a fixed Turkish fallback.
"""
import logging
from datetime import datetime, timezone
from typing import List, Optional

from google import genai

from db import get_setting
from engine import SUMMARY_ENTRY_LIMIT
from yks.models import StudyEntry
from yks.scoring import entry_net
from yks.stats import subject_rollups

logger = logging.getLogger(__name__)

GEMINI_MODEL = get_setting("GEMINI_MODEL", "gemini-2.0-flash")

EMPTY_RESPONSE = "Analiz oluşturulamadı."
SERVICE_UNAVAILABLE = "Şu anda yapay zeka koçuna ulaşılamıyor. Lütfen daha sonra tekrar dene."
NO_DATA_ADVICE = "Henüz veri girişi yapılmamış. Analiz için lütfen önce çalıştığın dersleri ekle."
NO_DATA_PLAN = "Haftalık plan oluşturmak için önce birkaç çalışma kaydı eklemelisin."
NO_DATA_REPORT = "Performans analizi yapabilmem için birkaç çalışma kaydın olmalı."


def _get_client():
    return genai.Client(api_key=get_setting("GEMINI_API_KEY"))


def generate(prompt: str, client=None) -> str:
    """Send a prompt to Gemini and return its text, or a fallback string on any failure."""
    try:
        client = client or _get_client()
        resp = client.models.generate_content(model=GEMINI_MODEL, contents=prompt)
        text = getattr(resp, "text", None)
        return (text or "").strip() or EMPTY_RESPONSE
    except Exception as e:
        logger.error(f"Gemini API error: {e}")
        return SERVICE_UNAVAILABLE


def prepare_summary(entries: List[StudyEntry]) -> str:
    """One line per entry for the most recent entries (list is newest first)."""
    if not entries:
        return "Henüz veri yok."
    lines = []
    for e in entries[:SUMMARY_ENTRY_LIMIT]:
        lines.append(
            f"- {e.date.strftime('%d.%m.%Y')}: {e.subject.value} ({e.topic}) - "
            f"{e.correct_count} Doğru, {e.incorrect_count} Yanlış ({entry_net(e):.2f} Net), "
            f"{e.duration_minutes} dk."
        )
    return "\n".join(lines)


def build_advice_prompt(entries: List[StudyEntry]) -> str:
    return f"""
Sen tecrübeli ve motive edici bir YKS (Yükseköğretim Kurumları Sınavı) öğrenci koçusun.
Aşağıda bir öğrencinin son çalışma kayıtları bulunmaktadır. "Net" hesabı (4 yanlış 1 doğruyu götürür) yapılmıştır.

Bu verileri analiz et ve öğrenciye şunları içeren kısa, markdown formatında bir geri bildirim ver:
1. Genel bir motivasyon cümlesi.
2. Hangi derslerde başarılı (yüksek net) ve hangilerinde dikkatsiz veya eksik (çok yanlış) olduğu hakkında bir gözlem.
3. Yanlış sayısı yüksek olan konular için spesifik bir öneri.
4. Uzun süredir çalışılmayan dersler varsa, "tekrar zamanı geldi" uyarısı ver.

Çok uzun yazma, öz ve vurucu ol. Samimi bir dil kullan ("sen" dili).

Öğrenci Verileri:
{prepare_summary(entries)}
""".strip()


def build_weekly_plan_prompt(entries: List[StudyEntry], now: Optional[datetime] = None) -> str:
    rollups = subject_rollups(entries, now=now)
    stats_text = "\n".join(
        f"{subject}: Toplam {s['total_questions']} soru, Ortalama Net: {s['avg_net']:.2f}, {s['count']} kayıt"
        for subject, s in rollups.items()
    )
    return f"""
Sen deneyimli bir YKS (Yükseköğretim Kurumları Sınavı) çalışma planı uzmanısın.

Aşağıda bir öğrencinin ders bazlı performans istatistikleri ve son çalışma kayıtları var:

Ders İstatistikleri:
{stats_text}

Son Kayıtlar:
{prepare_summary(entries)}

Bu öğrenci için kişiselleştirilmiş bir 7 günlük (Pazartesi-Pazar) çalışma programı oluştur.

Kurallar:
- Zayıf dersler (düşük net) için DAHA FAZLA süre ayır
- Güçlü derslerin pratiğini tamamen bırakma ama daha az süre ver
- Günlük toplam çalışma 5-8 saat olsun
- Her gün 2-3 farklı ders olsun
- Haftada en az 1 deneme sınavı çözümü planla
- Aralıklı tekrar kuralını uygula (3 gün önce çalışılan konuları tekrar programla)

Formatı:
Her gün için:
## 📅 [Gün adı]
- **[Saat aralığı]** — [Ders]: [Konu/Aktivite]

Sonunda kısa bir motivasyon mesajı ekle. Samimi dil kullan.
""".strip()


def build_performance_prompt(entries: List[StudyEntry], now: Optional[datetime] = None) -> str:
    rollups = subject_rollups(entries, now=now or datetime.now(timezone.utc))
    stats_text = "\n".join(
        f"{subject}: {s['total_questions']} soru, {s['net']:.2f} net, %{s['accuracy']:.1f} doğruluk, "
        f"{s['questions_per_hour']:.1f} soru/saat, {s['minutes']} dk süre, son çalışma {s['days_since']} gün önce"
        for subject, s in rollups.items()
    )
    return f"""
Sen bir eğitim veri analisti ve YKS uzmanısın.

Aşağıda bir öğrencinin tüm ders bazlı performans verileri var:

{stats_text}

Detaylı bir performans raporu oluştur. Şu başlıkları kullan:

## 💪 Güçlü Yönler
Yüksek net ve doğruluk oranına sahip dersler. Neden iyi olduğuna dair kısa analiz.

## ⚠️ Geliştirilmesi Gereken Alanlar
Düşük net veya yüksek yanlış oranına sahip dersler. Spesifik öneriler.

## ⏰ Tekrar Gereken Konular
Uzun süredir çalışılmayan dersler (3+ gün). Aralıklı tekrar hatırlatması.

## 📊 Verimlilik Analizi
Soru çözme hızı (soru/saat) değerlendirmesi. Hangi derslerde yavaş, hangisinde hızlı.

## 🎯 Öncelik Sıralaması
Bu hafta hangi derslere öncelik vermeli? Sıralı liste.

Kısa ve öz yaz. Samimi dil kullan.
""".strip()


def get_study_advice(entries: List[StudyEntry], client=None) -> str:
    if not entries:
        return NO_DATA_ADVICE
    return generate(build_advice_prompt(entries), client=client)


def get_weekly_plan(entries: List[StudyEntry], client=None) -> str:
    if not entries:
        return NO_DATA_PLAN
    return generate(build_weekly_plan_prompt(entries), client=client)


def get_performance_analysis(entries: List[StudyEntry], client=None) -> str:
    if not entries:
        return NO_DATA_REPORT
    return generate(build_performance_prompt(entries), client=client)
