from PySide6.QtCore import Qt, QRectF
from PySide6.QtGui import QBrush, QColor, QIcon, QPainter, QPainterPath, QPixmap

IDLE_COLOR = QColor(0, 0, 0)
ACTIVE_COLOR = QColor(10, 132, 255)


def icon_play_rectangle(size: int = 22, color: QColor = IDLE_COLOR) -> QPixmap:
    """Rounded rectangle with a play triangle cut out of it."""
    pm = QPixmap(size, size)
    pm.fill(Qt.transparent)
    painter = QPainter(pm)
    painter.setRenderHint(QPainter.Antialiasing, True)
    painter.setPen(Qt.NoPen)
    painter.setBrush(QBrush(color))

    pad_x = size * 0.08
    pad_y = size * 0.18
    body = QPainterPath()
    body.addRoundedRect(QRectF(pad_x, pad_y, size - 2 * pad_x, size - 2 * pad_y), size * 0.14, size * 0.14)

    tri = QPainterPath()
    cx = size / 2.0
    cy = size / 2.0
    half = size * 0.18
    tri.moveTo(cx - half * 0.8, cy - half)
    tri.lineTo(cx + half, cy)
    tri.lineTo(cx - half * 0.8, cy + half)
    tri.closeSubpath()

    painter.drawPath(body.subtracted(tri))
    painter.end()
    return pm


def get_status_icon(active: bool = False) -> QIcon:
    icon = QIcon()
    color = ACTIVE_COLOR if active else IDLE_COLOR
    for size in (16, 22, 32, 44):
        icon.addPixmap(icon_play_rectangle(size, color))
    # Template icons follow the menu bar appearance; the active icon keeps its tint.
    icon.setIsMask(not active)
    return icon
