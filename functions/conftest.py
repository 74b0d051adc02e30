# Test environment setup: firebase_functions needs a default bucket name at
# import time of `main` when registering storage triggers.
import json
import os

os.environ.setdefault("FIREBASE_CONFIG", json.dumps({"storageBucket": "friendlychat.appspot.com"}))
