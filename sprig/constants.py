import os

REPO_DIR_NAME = os.environ.get("SPRIG_DIR", ".sprig")
DEFAULT_BRANCH = "master"
HASH_LENGTH = 40
STATE_FILE = "STATE.json"

ROOT_COMMIT_MESSAGE = "initial commit"
ROOT_COMMIT_TIMESTAMP = 0

CONFLICT_START = b"<<<<<<< HEAD\n"
CONFLICT_SEPARATOR = b"=======\n"
CONFLICT_END = b">>>>>>>\n"

# used to address branch records, so it may not appear in branch names
BRANCH_NAME_SEPARATOR = "/"
