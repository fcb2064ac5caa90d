from sentinel.modules.alerts.models import EmergencyAlert
from sentinel.shared.schemas import ensure_utc


def format_alert_message(alert: EmergencyAlert, subject_id: str) -> str:
    """Render the plain-text body shared by the email and SMS channels."""
    vitals = alert.vitals
    alert_type = alert.type.value.replace("_", " ").upper()
    time = ensure_utc(alert.timestamp).strftime("%Y-%m-%d %H:%M:%S UTC")
    device = vitals.device_id or "unknown"

    return (
        "CRITICAL HEALTH ALERT\n"
        "\n"
        f"Patient ID: {subject_id}\n"
        f"Alert Type: {alert_type}\n"
        f"Time: {time}\n"
        "\n"
        "Current Vitals:\n"
        f"- Heart Rate: {vitals.heart_rate:.0f} bpm\n"
        f"- Blood Oxygen: {vitals.blood_oxygen:.1f}%\n"
        f"- Temperature: {vitals.temperature:.1f}°C\n"
        "\n"
        f"Device: {device}\n"
        "\n"
        "This is an automated alert from the Vital Sentinel health monitoring system. "
        "Please respond immediately."
    )
