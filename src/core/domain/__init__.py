"""Modelos y entidades del dominio.

Por qué:
- Aquí viven el store de alias, la validación de hostnames y el orden
  canónico: estructuras puras, sin ficheros ni CLI.
"""
