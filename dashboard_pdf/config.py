"""Application configuration."""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Export settings loaded from environment variables.

    The settings object is built once at the process edge and passed into the
    renderer; pipeline stages only ever see the instance they were given.
    """

    # Chrome/Chromium settings
    chrome_binary: str = "/usr/bin/chromium"
    chrome_user_data_base: str | None = None
    chrome_launch_timeout: float = 10.0
    ignore_https_errors: bool = True

    # Viewport settings
    viewport_width: int = Field(default=1200, gt=0)
    initial_viewport_height: int = Field(default=800, gt=0)
    device_scale_factor: float = 2.0

    # Navigation settings
    navigation_timeout: float = 120.0
    request_timeout: float = 30.0
    force_kiosk: bool = False
    localhost_alias: str | None = None

    # Stabilization (first pass walks the page, second pass confirms after resize)
    scroll_step_px: int = Field(default=200, gt=0)
    scroll_pause_ms: int = 100
    scroll_settle_ms: int = 500
    confirm_scroll_step_px: int = Field(default=100, gt=0)
    confirm_scroll_pause_ms: int = 50
    confirm_scroll_settle_ms: int = 1000

    # Extent measurement
    bottom_padding: int = 50
    min_height: int = 1200

    # Selector lists, tried in order where order matters
    scroll_container_selectors: list[str] = [
        ".scrollbar-view",
        ".dashboard-container",
        ".main-view",
    ]
    panel_selectors: list[str] = [".panel-container"]
    title_selectors: list[str] = [
        'div[data-testid="dashboard-title"]',
        'h1[data-testid="page-title"]',
        "#display_actual_dashboard_title",
    ]
    use_panel_heading_title: bool = True
    # Text found here replaces the from/to part of the file name
    date_selectors: list[str] = ["#display_actual_date"]
    login_marker_selectors: list[str] = ['a[href*="reset-email"]']
    hidden_selectors: list[str] = [
        ".navbar",
        ".sidemenu",
        ".dashboard-settings",
        ".submenu-controls",
        ".gf-form-inline",
        ".alert-rule-item__icon",
        ".page-toolbar",
        ".footer",
        ".panel-info-corner",
        ".react-resizable-handle",
    ]

    # Header and branding
    timezone: str = "Europe/Skopje"
    logo_filename: str = "Reporting_A1_logo.png"
    logo_path: str | None = None

    # Output settings
    output_dir: str = "./output"
    default_output_name: str = "default_dashboard.pdf"
    debug_snapshot: bool = False
    debug_dir: str = "./debug"

    # Logging
    log_level: str = "INFO"
    debug: bool = False

    model_config = SettingsConfigDict(env_prefix="DASHBOARD_PDF_", env_file=".env")
