STYLE_SHEET = """
QMainWindow {
    background-color: #0f172a;
}

/* Sidebar */
QFrame#Sidebar {
    background-color: #111827;
    border-right: 1px solid #1f2937;
}

QLabel#LogoText {
    color: #f472b6;
    font-size: 22px;
    font-weight: bold;
    padding: 20px;
}

QLabel#SectionLabel {
    color: #6b7280;
    font-size: 11px;
    font-weight: bold;
    margin-left: 16px;
}

QLabel#StatusText {
    color: #9ca3af;
    padding-left: 16px;
}

QPushButton#PrimaryBtn, QPushButton#SecondaryBtn {
    color: white;
    font-weight: bold;
    border-radius: 10px;
    padding: 12px;
    margin: 6px 10px;
}

QPushButton#PrimaryBtn {
    background-color: #db2777;
}

QPushButton#PrimaryBtn:hover {
    background-color: #be185d;
}

QPushButton#SecondaryBtn {
    background-color: #374151;
}

QPushButton:disabled {
    background-color: #1f2937;
    color: #4b5563;
}

QComboBox {
    color: #e5e7eb;
    background-color: #1f2937;
    border: 1px solid #374151;
    border-radius: 6px;
    padding: 4px 8px;
    margin: 0px 16px;
}

/* Viewports */
QWidget#ViewportContainer {
    background-color: #111827;
    border: 1px solid #1f2937;
    border-radius: 10px;
}

QLabel#ViewportTitle {
    color: #9ca3af;
    font-size: 11px;
    font-weight: bold;
}
"""
