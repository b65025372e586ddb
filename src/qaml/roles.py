"""UI role taxonomy. Each role's value is its stable transport string."""
from enum import Enum


class ElementRole(Enum):
    ANY = "any"
    OTHER = "other"
    APPLICATION = "application"
    GROUP = "group"
    WINDOW = "window"
    SHEET = "sheet"
    DRAWER = "drawer"
    ALERT = "alert"
    DIALOG = "dialog"
    BUTTON = "button"
    RADIO_BUTTON = "radioButton"
    RADIO_GROUP = "radioGroup"
    CHECK_BOX = "checkBox"
    DISCLOSURE_TRIANGLE = "disclosureTriangle"
    POP_UP_BUTTON = "popUpButton"
    COMBO_BOX = "comboBox"
    MENU_BUTTON = "menuButton"
    TOOLBAR_BUTTON = "toolbarButton"
    POPOVER = "popover"
    KEYBOARD = "keyboard"
    KEY = "key"
    NAVIGATION_BAR = "navigationBar"
    TAB_BAR = "tabBar"
    TAB_GROUP = "tabGroup"
    TOOLBAR = "toolbar"
    STATUS_BAR = "statusBar"
    TABLE = "table"
    TABLE_ROW = "tableRow"
    TABLE_COLUMN = "tableColumn"
    OUTLINE = "outline"
    OUTLINE_ROW = "outlineRow"
    BROWSER = "browser"
    COLLECTION_VIEW = "collectionView"
    SLIDER = "slider"
    PAGE_INDICATOR = "pageIndicator"
    PROGRESS_INDICATOR = "progressIndicator"
    ACTIVITY_INDICATOR = "activityIndicator"
    SEGMENTED_CONTROL = "segmentedControl"
    PICKER = "picker"
    PICKER_WHEEL = "pickerWheel"
    SWITCH = "switch"
    TOGGLE = "toggle"
    LINK = "link"
    IMAGE = "image"
    ICON = "icon"
    SEARCH_FIELD = "searchField"
    SCROLL_VIEW = "scrollView"
    SCROLL_BAR = "scrollBar"
    STATIC_TEXT = "staticText"
    TEXT_FIELD = "textField"
    SECURE_TEXT_FIELD = "secureTextField"
    DATE_PICKER = "datePicker"
    TEXT_VIEW = "textView"
    MENU = "menu"
    MENU_ITEM = "menuItem"
    MENU_BAR = "menuBar"
    MENU_BAR_ITEM = "menuBarItem"
    MAP = "map"
    WEB_VIEW = "webView"
    INCREMENT_ARROW = "incrementArrow"
    DECREMENT_ARROW = "decrementArrow"
    TIMELINE = "timeline"
    RATING_INDICATOR = "ratingIndicator"
    VALUE_INDICATOR = "valueIndicator"
    SPLIT_GROUP = "splitGroup"
    SPLITTER = "splitter"
    RELEVANCE_INDICATOR = "relevanceIndicator"
    COLOR_WELL = "colorWell"
    HELP_TAG = "helpTag"
    MATTE = "matte"
    DOCK_ITEM = "dockItem"
    RULER = "ruler"
    RULER_MARKER = "rulerMarker"
    GRID = "grid"
    LEVEL_INDICATOR = "levelIndicator"
    CELL = "cell"
    LAYOUT_AREA = "layoutArea"
    LAYOUT_ITEM = "layoutItem"
    HANDLE = "handle"
    STEPPER = "stepper"
    TAB = "tab"
    TOUCH_BAR = "touchBar"
    STATUS_ITEM = "statusItem"

    @classmethod
    def parse(cls, raw) -> "ElementRole":
        """Map a driver-supplied role (enum member or string) onto the taxonomy."""
        if isinstance(raw, cls):
            return raw
        try:
            return cls(raw)
        except ValueError:
            return cls.OTHER


TEXT_INPUT_ROLES = frozenset({ElementRole.TEXT_FIELD, ElementRole.SECURE_TEXT_FIELD, ElementRole.TEXT_VIEW})
KEYBOARD_ROLES = frozenset({ElementRole.KEYBOARD, ElementRole.KEY})
