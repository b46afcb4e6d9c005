import logging
from dataclasses import replace

from PyQt6.QtWidgets import (
    QApplication,
    QComboBox,
    QFileDialog,
    QFrame,
    QHBoxLayout,
    QLabel,
    QMainWindow,
    QMessageBox,
    QPushButton,
    QVBoxLayout,
    QWidget,
)
from PyQt6.QtCore import QThread, pyqtSignal

from pixelguard.config.settings import Settings, get_settings
from pixelguard.engine.pipeline import ObscurationPipeline
from pixelguard.engine.pixelate import SAMPLING_MODES
from pixelguard.ui.image_viewer import SyncedImageView
from pixelguard.ui.styles import STYLE_SHEET
from pixelguard.utils.imageio import load_image, save_image

logger = logging.getLogger(__name__)

STATUS_COLORS = {
    "idle": "#9ca3af",
    "busy": "#f59e0b",
    "done": "#4ade80",
    "error": "#ef4444",
}


class ObscureWorker(QThread):
    result_ready = pyqtSignal(object, int)
    error_occurred = pyqtSignal(str)

    def __init__(self, pipeline: ObscurationPipeline, image):
        super().__init__()
        self.pipeline = pipeline
        self.image = image

    def run(self):
        try:
            result = self.pipeline.run(self.image)
        except Exception as e:
            logger.exception("Obscuration worker failed")
            self.error_occurred.emit(str(e))
            return
        self.result_ready.emit(result.image, len(result.faces))


class MainWindow(QMainWindow):
    def __init__(self, settings: Settings = None):
        super().__init__()
        self.settings = settings or get_settings()
        self.source = None
        self.output = None
        self.worker = None
        self.setWindowTitle("PixelGuard | Face Obscuration")
        self.resize(1280, 800)
        self.setStyleSheet(STYLE_SHEET)
        self.init_ui()

    def init_ui(self):
        main_widget = QWidget()
        self.setCentralWidget(main_widget)
        h_layout = QHBoxLayout(main_widget)
        h_layout.setContentsMargins(0, 0, 0, 0)
        h_layout.setSpacing(0)

        # --- Sidebar ---
        sidebar = QFrame()
        sidebar.setObjectName("Sidebar")
        sidebar.setFixedWidth(260)
        side_layout = QVBoxLayout(sidebar)

        side_layout.addWidget(QLabel("PixelGuard", objectName="LogoText"))

        self.btn_open = QPushButton("Open Image", objectName="PrimaryBtn")
        self.btn_open.clicked.connect(self.open_image)
        side_layout.addWidget(self.btn_open)

        self.btn_save = QPushButton("Save Result", objectName="SecondaryBtn")
        self.btn_save.clicked.connect(self.save_result)
        self.btn_save.setEnabled(False)
        side_layout.addWidget(self.btn_save)

        side_layout.addSpacing(16)
        side_layout.addWidget(QLabel("BLOCK COLOUR", objectName="SectionLabel"))
        self.sampling_box = QComboBox()
        self.sampling_box.addItems(SAMPLING_MODES)
        self.sampling_box.setCurrentText(self.settings.pixel_sampling)
        self.sampling_box.currentTextChanged.connect(self._rerun)
        side_layout.addWidget(self.sampling_box)

        side_layout.addSpacing(16)
        side_layout.addWidget(QLabel("STATUS", objectName="SectionLabel"))
        self.status_label = QLabel(objectName="StatusText")
        side_layout.addWidget(self.status_label)
        self._set_status("Ready", "idle")

        side_layout.addStretch()

        # --- Viewports ---
        workspace = QHBoxLayout()
        workspace.setContentsMargins(20, 20, 20, 20)
        workspace.setSpacing(15)

        self.original_view = SyncedImageView()
        self.obscured_view = SyncedImageView()
        for title, view in (("ORIGINAL", self.original_view), ("OBSCURED", self.obscured_view)):
            container = QWidget(objectName="ViewportContainer")
            box = QVBoxLayout(container)
            box.addWidget(QLabel(title, objectName="ViewportTitle"))
            box.addWidget(view)
            workspace.addWidget(container)

        self.original_view.view_changed.connect(self.obscured_view.follow)
        self.obscured_view.view_changed.connect(self.original_view.follow)

        h_layout.addWidget(sidebar)
        h_layout.addLayout(workspace)

    def _set_status(self, text, state):
        self.status_label.setText(text)
        self.status_label.setStyleSheet(f"color: {STATUS_COLORS[state]}; padding-left: 16px;")

    def _build_pipeline(self) -> ObscurationPipeline:
        settings = replace(self.settings, pixel_sampling=self.sampling_box.currentText())
        return ObscurationPipeline.from_settings(settings)

    def open_image(self):
        path, _ = QFileDialog.getOpenFileName(self, "Open Image", "", "Images (*.jpg *.jpeg *.png *.bmp *.webp)")
        if not path:
            return
        try:
            self.source = load_image(path)
        except Exception as e:
            self.on_error(str(e))
            return
        self.original_view.show_image(self.source)
        self._rerun()

    def _rerun(self, *_):
        if self.source is None or (self.worker is not None and self.worker.isRunning()):
            return
        self.output = None
        self.obscured_view.clear()
        self.btn_save.setEnabled(False)
        self.btn_open.setEnabled(False)
        self._set_status("Obscuring faces...", "busy")

        try:
            pipeline = self._build_pipeline()
        except Exception as e:
            self.btn_open.setEnabled(True)
            self.on_error(str(e))
            return

        self.worker = ObscureWorker(pipeline, self.source)
        self.worker.result_ready.connect(self.on_done)
        self.worker.error_occurred.connect(self.on_error)
        self.worker.finished.connect(lambda: self.btn_open.setEnabled(True))
        self.worker.start()

    def on_done(self, image, face_count):
        self.output = image
        self.obscured_view.show_image(image)
        self.btn_save.setEnabled(True)
        self._set_status(f"{face_count} face(s) obscured", "done")
        self.sync_views()

    def sync_views(self):
        QApplication.processEvents()
        if self.original_view.has_image() and self.obscured_view.has_image():
            self.original_view.resetTransform()
            self.original_view.fit()
            self.obscured_view.setTransform(self.original_view.transform())

    def save_result(self):
        if self.output is None:
            return
        path, _ = QFileDialog.getSaveFileName(self, "Save Result", "obscured.png", "Images (*.png *.jpg)")
        if not path:
            return
        try:
            save_image(path, self.output)
        except Exception as e:
            self.on_error(str(e))
            return
        self._set_status(f"Saved {path}", "done")

    def on_error(self, message):
        self.output = None
        self.obscured_view.clear()
        self.btn_save.setEnabled(False)
        self._set_status("Error", "error")
        QMessageBox.critical(self, "Error", f"Obscuration failed: {message}")
