from __future__ import annotations

SubjectID = str
GroupName = str
EventName = str
