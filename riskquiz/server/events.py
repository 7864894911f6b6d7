"""Socket.IO event names exchanged with participant and admin clients."""

# Participant -> server (default namespace)
JOIN = "join"
SUBMIT_ANSWER = "submit_answer"
SUBMIT_FINAL_CHOICE = "submit_final_choice"

# Admin -> server (/admin namespace)
ADMIN_JOIN = "admin_join"
START = "start"
REQUEST_RESULTS = "request_results"
GET_LOGS = "get_logs"
RESET = "reset"
STOP = "stop"

# Server -> one participant
WAITING = "waiting"
QUESTION = "question"
SHOW_FINAL_CHOICE_PROMPT = "show_final_choice_prompt"
EXPERIMENT_COMPLETE = "experiment_complete"
SESSION_ENDED = "session_ended"

# Server -> admin audience
SESSION_SNAPSHOT = "session_snapshot"
PARTICIPANT_COMPLETED = "participant_completed"
ALL_COMPLETE = "all_complete"
RESULTS_DATA = "results_data"
EXPERIMENT_LOGS = "experiment_logs"
SESSION_RESET = "session_reset"

PARTICIPANT_NAMESPACE = "/"
ADMIN_NAMESPACE = "/admin"
ADMIN_ROOM = "admin_broadcast"
