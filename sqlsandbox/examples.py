# sqlsandbox/examples.py
import json

# Worked answer shown to the model so it copies the key names and shapes.
EXAMPLE_OUTPUT = {
    "query": "SELECT name, age FROM students WHERE age > 20;",
    "tableDefinition": (
        "CREATE TABLE students (id INTEGER PRIMARY KEY, name TEXT, "
        "age INTEGER, major TEXT);"
    ),
    "seedStatements": [
        "INSERT INTO students (id, name, age, major) VALUES (1, 'Alice', 22, 'Computer Science');",
        "INSERT INTO students (id, name, age, major) VALUES (2, 'Bob', 19, 'Physics');",
        "INSERT INTO students (id, name, age, major) VALUES (3, 'Charlie', 25, 'Mathematics');",
        "INSERT INTO students (id, name, age, major) VALUES (4, 'Diana', 21, 'Biology');",
        "INSERT INTO students (id, name, age, major) VALUES (5, 'Eve', 23, 'Chemistry');",
    ],
}

def example_block() -> str:
    return json.dumps(EXAMPLE_OUTPUT, indent=2)
