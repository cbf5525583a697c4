# File: const.py
"""Constants for the Pet Progress integration.

This file centralizes storage keys, defaults, the pet stage table, service
names, signal suffixes and event names used across the integration.
"""

from datetime import timedelta
from enum import StrEnum
import logging

from homeassistant.const import Platform

# ------------------------------------------------------------------------------------------------
# General / Integration Information
# ------------------------------------------------------------------------------------------------
# Integration Name
PET_PROGRESS_TITLE = "Pet Progress"

# Integration Domain
DOMAIN = "pet_progress"

# Logger
LOGGER = logging.getLogger(__package__)

# Supported Platforms
PLATFORMS = [
    Platform.BUTTON,
    Platform.SENSOR,
]

# Coordinator
COORDINATOR = "coordinator"
COORDINATOR_SUFFIX = "_coordinator"

# Storage and Versioning
STORE = "store"
STORAGE_KEY = "pet_progress_data"
STORAGE_VERSION = 1
SCHEMA_VERSION = 1

# Shared widget snapshot storage (read by home-screen renderers)
WIDGET_STORAGE_KEY = "pet_progress_widget"
WIDGET_STORAGE_VERSION = 1

# Rollover check cadence (the rollover itself is idempotent per day)
ROLLOVER_CHECK_INTERVAL = timedelta(minutes=1)

# ------------------------------------------------------------------------------------------------
# Configuration Keys (options flow)
# ------------------------------------------------------------------------------------------------
CONF_XP_PER_TASK = "xp_per_task"
CONF_HISTORY_RETENTION_DAYS = "history_retention_days"

DEFAULT_XP_PER_TASK = 10
MIN_XP_PER_TASK = 1
MAX_XP_PER_TASK = 1000

# 0 keeps every task forever
DEFAULT_HISTORY_RETENTION_DAYS = 0
MAX_HISTORY_RETENTION_DAYS = 3650

# ------------------------------------------------------------------------------------------------
# Storage Data Keys
# ------------------------------------------------------------------------------------------------
DATA_META = "meta"
DATA_META_SCHEMA_VERSION = "schema_version"

DATA_TASKS = "tasks"
DATA_PET_STATE = "pet_state"
DATA_SETTINGS = "settings"
DATA_CURRENT_TASK_ID = "current_task_id"
DATA_LAST_ROLLOVER_DATE = "last_rollover_date"
DATA_TASK_TEMPLATES = "task_templates"

# Task fields
DATA_TASK_ID = "id"
DATA_TASK_TITLE = "title"
DATA_TASK_DESCRIPTION = "description"
DATA_TASK_DUE_HOUR = "due_hour"
DATA_TASK_DAY_KEY = "day_key"
DATA_TASK_STATUS = "status"
DATA_TASK_IS_ANYTIME = "is_anytime"
DATA_TASK_IS_RECURRING = "is_recurring"
DATA_TASK_RECURRING_DAYS = "recurring_days"
DATA_TASK_TEMPLATE_ID = "template_id"

# Legacy per-flag status fields (migrated to DATA_TASK_STATUS on load)
DATA_TASK_IS_DONE = "is_done"
DATA_TASK_IS_SKIPPED = "is_skipped"
DATA_TASK_IS_MISSED = "is_missed"

# Template fields
DATA_TEMPLATE_ID = "id"
DATA_TEMPLATE_TITLE = "title"
DATA_TEMPLATE_DESCRIPTION = "description"
DATA_TEMPLATE_DUE_HOUR = "due_hour"
DATA_TEMPLATE_IS_ANYTIME = "is_anytime"
DATA_TEMPLATE_IS_RECURRING = "is_recurring"
DATA_TEMPLATE_RECURRING_DAYS = "recurring_days"

# Pet state fields
DATA_PET_XP = "xp"
DATA_PET_STAGE_INDEX = "stage_index"

# Settings fields
DATA_SETTINGS_GRACE_MINUTES = "grace_minutes"
DATA_SETTINGS_PRIVACY_POLICY_URL = "privacy_policy_url"

# ------------------------------------------------------------------------------------------------
# Task Status
# ------------------------------------------------------------------------------------------------


class TaskStatus(StrEnum):
    """Resolution status of a task. A task holds exactly one."""

    PENDING = "pending"
    DONE = "done"
    SKIPPED = "skipped"
    MISSED = "missed"


# ------------------------------------------------------------------------------------------------
# Tasks / Clock Defaults
# ------------------------------------------------------------------------------------------------
ANYTIME_HOUR = -1
TASK_ID_SEPARATOR = "-"

DEFAULT_GRACE_MINUTES = 15
MIN_GRACE_MINUTES = 0
MAX_GRACE_MINUTES = 30

DEFAULT_PRIVACY_POLICY_URL = "https://example.com/privacy"

# Built-in first-run task list: one task per hour in [first, last]
DEFAULT_TASK_FIRST_HOUR = 6
DEFAULT_TASK_LAST_HOUR = 22
DEFAULT_TASK_TITLE_FMT = "Task at {hour}:00"

# Weekday indices, Sunday first
ALL_WEEKDAYS = [0, 1, 2, 3, 4, 5, 6]
WEEKDAY_NAMES = [
    "sunday",
    "monday",
    "tuesday",
    "wednesday",
    "thursday",
    "friday",
    "saturday",
]

# ------------------------------------------------------------------------------------------------
# Pet Stages / XP
# ------------------------------------------------------------------------------------------------
STAGE_NAME = "name"
STAGE_MIN_XP = "min_xp"
STAGE_ICON = "icon"

# Each stage needs ~75% more XP than the previous one
PET_STAGES: list[dict[str, str | int]] = [
    {STAGE_NAME: "Egg", STAGE_MIN_XP: 0, STAGE_ICON: "mdi:egg"},
    {STAGE_NAME: "Chicken", STAGE_MIN_XP: 10, STAGE_ICON: "mdi:bird"},
    {STAGE_NAME: "Weasel", STAGE_MIN_XP: 28, STAGE_ICON: "mdi:paw"},
    {STAGE_NAME: "Badger", STAGE_MIN_XP: 58, STAGE_ICON: "mdi:paw"},
    {STAGE_NAME: "Hawk", STAGE_MIN_XP: 111, STAGE_ICON: "mdi:bird"},
    {STAGE_NAME: "Barracuda", STAGE_MIN_XP: 204, STAGE_ICON: "mdi:fish"},
    {STAGE_NAME: "Coyote", STAGE_MIN_XP: 367, STAGE_ICON: "mdi:dog-side"},
    {STAGE_NAME: "Wild Boar", STAGE_MIN_XP: 652, STAGE_ICON: "mdi:pig"},
    {STAGE_NAME: "Wolf", STAGE_MIN_XP: 1151, STAGE_ICON: "mdi:dog"},
    {STAGE_NAME: "Crocodile", STAGE_MIN_XP: 2024, STAGE_ICON: "mdi:alligator"},
    {STAGE_NAME: "Mako Shark", STAGE_MIN_XP: 3552, STAGE_ICON: "mdi:shark"},
    {STAGE_NAME: "Great White Shark", STAGE_MIN_XP: 6226, STAGE_ICON: "mdi:shark"},
    {STAGE_NAME: "Orca", STAGE_MIN_XP: 10906, STAGE_ICON: "mdi:dolphin"},
    {STAGE_NAME: "Bison", STAGE_MIN_XP: 19096, STAGE_ICON: "mdi:cow"},
    {STAGE_NAME: "Bull", STAGE_MIN_XP: 33418, STAGE_ICON: "mdi:cow"},
    {STAGE_NAME: "Stallion", STAGE_MIN_XP: 58482, STAGE_ICON: "mdi:horse"},
    {STAGE_NAME: "Grizzly Bear", STAGE_MIN_XP: 102344, STAGE_ICON: "mdi:teddy-bear"},
    {STAGE_NAME: "Polar Bear", STAGE_MIN_XP: 179102, STAGE_ICON: "mdi:teddy-bear"},
    {STAGE_NAME: "Rhinoceros", STAGE_MIN_XP: 313429, STAGE_ICON: "mdi:rhino"},
    {STAGE_NAME: "Hippopotamus", STAGE_MIN_XP: 548501, STAGE_ICON: "mdi:paw"},
    {STAGE_NAME: "Elephant", STAGE_MIN_XP: 959877, STAGE_ICON: "mdi:elephant"},
    {
        STAGE_NAME: "Silver Back Gorilla",
        STAGE_MIN_XP: 1679785,
        STAGE_ICON: "mdi:paw",
    },
    {STAGE_NAME: "Cape Buffalo", STAGE_MIN_XP: 2939624, STAGE_ICON: "mdi:cow"},
    {STAGE_NAME: "Lion", STAGE_MIN_XP: 5144342, STAGE_ICON: "mdi:cat"},
    {STAGE_NAME: "Komodo Dragon", STAGE_MIN_XP: 9002598, STAGE_ICON: "mdi:snake"},
    {STAGE_NAME: "Eagle", STAGE_MIN_XP: 15754547, STAGE_ICON: "mdi:bird"},
    {STAGE_NAME: "Phoenix", STAGE_MIN_XP: 27570457, STAGE_ICON: "mdi:fire"},
    {STAGE_NAME: "Dragon", STAGE_MIN_XP: 48248300, STAGE_ICON: "mdi:dragon"},
    {STAGE_NAME: "Human CEO", STAGE_MIN_XP: 84434525, STAGE_ICON: "mdi:account-tie"},
    {STAGE_NAME: "Golden CEO", STAGE_MIN_XP: 147760419, STAGE_ICON: "mdi:crown"},
]

STAGE_THRESHOLDS: tuple[int, ...] = tuple(
    int(stage[STAGE_MIN_XP]) for stage in PET_STAGES
)

# Miss penalty multiplier scales linearly from 1x at level 1 to 3x at level 30
MIN_PENALTY_LEVEL = 1
MAX_PENALTY_LEVEL = 30

# XP operation kinds used by the transition planner
XP_OP_REWARD = "reward"
XP_OP_PENALTY = "penalty"

# ------------------------------------------------------------------------------------------------
# Deep Links
# ------------------------------------------------------------------------------------------------
DEEP_LINK_SCHEME = "petprogress"

ACTION_COMPLETE = "complete"
ACTION_SKIP = "skip"
ACTION_MISS = "miss"
ACTION_NEXT = "next"
ACTION_PREV = "prev"

DEEP_LINK_ACTIONS = [
    ACTION_COMPLETE,
    ACTION_SKIP,
    ACTION_MISS,
    ACTION_NEXT,
    ACTION_PREV,
]

# ------------------------------------------------------------------------------------------------
# Feedback (haptic hint relayed to renderers)
# ------------------------------------------------------------------------------------------------
FEEDBACK_SUCCESS = "success"
FEEDBACK_ERROR = "error"
FEEDBACK_LIGHT = "light"

# ------------------------------------------------------------------------------------------------
# Events (Home Assistant bus)
# ------------------------------------------------------------------------------------------------
EVENT_WIDGET_RELOAD = "pet_progress_widget_reload"
EVENT_FEEDBACK = "pet_progress_feedback"

# ------------------------------------------------------------------------------------------------
# Dispatcher Signal Suffixes (instance scoped via get_event_signal)
# ------------------------------------------------------------------------------------------------
SIGNAL_SUFFIX_STATE_COMMITTED = "state_committed"
SIGNAL_SUFFIX_ROLLOVER_COMPLETED = "rollover_completed"
SIGNAL_SUFFIX_FEEDBACK_REQUESTED = "feedback_requested"
SIGNAL_SUFFIX_SETTINGS_UPDATED = "settings_updated"
SIGNAL_SUFFIX_HOUR_BOUNDARY = "hour_boundary"

# ------------------------------------------------------------------------------------------------
# Services
# ------------------------------------------------------------------------------------------------
SERVICE_COMPLETE_TASK = "complete_task"
SERVICE_SKIP_TASK = "skip_task"
SERVICE_MISS_TASK = "miss_task"
SERVICE_REOPEN_TASK = "reopen_task"
SERVICE_SELECT_TASK = "select_task"
SERVICE_NEXT_TASK = "next_task"
SERVICE_PREV_TASK = "prev_task"
SERVICE_EDIT_TASK = "edit_task"
SERVICE_ADD_TEMPLATE = "add_template"
SERVICE_DELETE_TEMPLATE = "delete_template"
SERVICE_SET_GRACE_MINUTES = "set_grace_minutes"
SERVICE_HANDLE_DEEP_LINK = "handle_deep_link"
SERVICE_CHECK_ROLLOVER = "check_rollover"

# Service fields
FIELD_TASK_ID = "task_id"
FIELD_TEMPLATE_ID = "template_id"
FIELD_TITLE = "title"
FIELD_DESCRIPTION = "description"
FIELD_DUE_HOUR = "due_hour"
FIELD_IS_ANYTIME = "is_anytime"
FIELD_IS_RECURRING = "is_recurring"
FIELD_RECURRING_DAYS = "recurring_days"
FIELD_GRACE_MINUTES = "grace_minutes"
FIELD_URL = "url"

# ------------------------------------------------------------------------------------------------
# Entities
# ------------------------------------------------------------------------------------------------
SENSOR_UID_SUFFIX_PET_STAGE = "_pet_stage"
SENSOR_UID_SUFFIX_PET_XP = "_pet_xp"
SENSOR_UID_SUFFIX_CURRENT_TASK = "_current_task"
BUTTON_UID_SUFFIX_FMT = "_{action}_button"

TRANS_KEY_SENSOR_PET_STAGE = "pet_stage"
TRANS_KEY_SENSOR_PET_XP = "pet_xp"
TRANS_KEY_SENSOR_CURRENT_TASK = "current_task"
TRANS_KEY_BUTTON_FMT = "{action}_task"

# Attributes
ATTR_XP = "xp"
ATTR_STAGE_INDEX = "stage_index"
ATTR_STAGE_NAME = "stage_name"
ATTR_STAGE_ICON = "icon"
ATTR_TITLE = "title"
ATTR_IS_ANYTIME = "is_anytime"
ATTR_LEVEL = "level"
ATTR_PROGRESS_PERCENT = "progress_percent"
ATTR_NEXT_STAGE_XP = "next_stage_xp"
ATTR_NEXT_STAGE_NAME = "next_stage_name"
ATTR_DUE_HOUR = "due_hour"
ATTR_STATUS = "status"
ATTR_DESCRIPTION = "description"
ATTR_ACTION = "action"
ATTR_FEEDBACK = "feedback"
ATTR_ENTRY_ID = "entry_id"
ATTR_TASK_ID = "task_id"
ATTR_DONE_COUNT = "done_count"
ATTR_TOTAL_COUNT = "total_count"

# Widget snapshot keys
WIDGET_TODAY_TASKS = "today_tasks"
WIDGET_CURRENT_INDEX = "current_index"
WIDGET_CURRENT_TASK_ID = "current_task_id"
WIDGET_PET_STATE = "pet_state"
WIDGET_GRACE_MINUTES = "grace_minutes"
WIDGET_LAST_ROLLOVER_AT = "last_rollover_at"
WIDGET_LAST_UPDATED = "last_updated"
WIDGET_ACTIVE_HOUR = "active_hour"

# ------------------------------------------------------------------------------------------------
# Messages / Errors
# ------------------------------------------------------------------------------------------------
MSG_NO_ENTRY_FOUND = "No Pet Progress entry found"
ERROR_TASK_NOT_FOUND_FMT = "Task '{}' not found"
ERROR_TEMPLATE_NOT_FOUND_FMT = "Template '{}' not found"
ERROR_TITLE_REQUIRED = "Template title is required"
ERROR_RECURRING_DAYS_REQUIRED = "Recurring templates need at least one day"
ERROR_INVALID_DEEP_LINK_FMT = "Unsupported deep link '{}'"

TRANS_KEY_ERROR_SINGLE_INSTANCE = "single_instance_allowed"
TRANS_KEY_ERROR_NO_ENTRY = "no_entry_found"
TRANS_KEY_ERROR_INVALID_TEMPLATE = "invalid_template"
TRANS_KEY_ERROR_INVALID_DEEP_LINK = "invalid_deep_link"
