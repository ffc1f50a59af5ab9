# sqlsandbox/prompt.py
from .examples import example_block

SYSTEM_INSTR = (
    "Given the following natural language request, generate:\n"
    "1. A SQLite SQL SELECT query that answers the request.\n"
    "2. A SQLite CREATE TABLE statement for a table that would contain relevant data for this query.\n"
    "3. At least 5 SQLite INSERT INTO statements to populate the table with sample data.\n"
    "\n"
    "Ensure the table name and column names in the SELECT query match the CREATE TABLE statement.\n"
    'The output should be in a JSON format with three keys: "query", "tableDefinition", and "seedStatements".\n'
    '"seedStatements" should be an array of strings, where each string is an INSERT INTO statement.\n'
)

def build_prompt(user_request: str) -> str:
    """
    Compose the instruction sent to the LLM.
    user_request is embedded verbatim; it is text for the model, never SQL.
    """
    parts = [
        SYSTEM_INSTR,
        f'Natural language request: "{user_request}"',
        "",
        "Example JSON output structure:",
        example_block(),
    ]
    return "\n".join(parts)
