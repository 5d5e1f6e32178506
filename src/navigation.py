APP_NAME = "Browser Rendering Playground"
APP_VERSION = "1.0.0"

FEATURE_PAGES = [
    {
        "path": "pages/1_Render_Playground.py",
        "title": "Render Playground",
        "description": "Render a URL as content, screenshot, PDF, markdown and more",
        "icon": "🌐",
    },
]

NAV_PAGES = [
    {"path": "pages/home.py", "title": "Home", "icon": "🏠"},
    *FEATURE_PAGES,
    {"path": "pages/system_info.py", "title": "System Info", "icon": "🔧"},
]
