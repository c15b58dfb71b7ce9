# ABOUTME: Tree-sitter queries for JavaScript module imports
# ABOUTME: Static query patterns for ES imports and CommonJS require declarations

IMPORT_STATEMENTS = """
(import_statement
  (import_clause) @import.clause
  source: (string) @import.source) @import.statement
"""

REQUIRE_DECLARATIONS = """
(variable_declarator
  name: (_) @require.target
  value: (call_expression
    function: (identifier) @require.function
    arguments: (arguments . (string) @require.source))) @require.declaration
"""

# Composite queries for import tracking
ALL_IMPORTS = f"""
{IMPORT_STATEMENTS}

{REQUIRE_DECLARATIONS}
"""
