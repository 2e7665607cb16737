# ----------------------------- MONGO COLLECTIONS --------------------------------
CHALLENGES_COLLECTION = 'challenges'
USER_CHALLENGES_COLLECTION = 'UserChallenges'

# ----------------------------- USER CHALLENGE STATUS --------------------------------
STATUS_NOT_STARTED = 'Not Started'

ROOT_MESSAGE = '🌿 EcoTrack Server is running'
