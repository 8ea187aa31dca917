from decouple import config

# Re-clamp the pass score into [0, total correct answers] whenever a question is added, removed or edited.
# When disabled, the builder leaves the pass score alone and rejects an out-of-bound value on save instead.
QUESTIONNAIRE_AUTO_CLAMP_PASS_SCORE: bool = config("QUESTIONNAIRE_AUTO_CLAMP_PASS_SCORE", default=True, cast=bool)

# Treat passed users as a set: a user who passes again is not appended a second time.
# Disable to append on every pass (duplicates possible).
QUESTIONNAIRE_DEDUPLICATE_PASSED_USERS: bool = config(
    "QUESTIONNAIRE_DEDUPLICATE_PASSED_USERS", default=True, cast=bool
)
