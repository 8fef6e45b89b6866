# --- Estados da Conversa de nova tarefa ---
ASKING_TITLE = 0
ASKING_CATEGORY = 1
ASKING_PRIORITY = 2
ASKING_DUE_DATE = 3
ASKING_CONFIRMATION = 4
