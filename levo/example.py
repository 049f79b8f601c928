"""
Example workspace.

``levo --example`` writes a small, self-contained workspace (configuration,
schema and a template set) that can be generated from straight away with
``levo --config config.json``.
"""

import sys
from pathlib import Path
from typing import Optional, TextIO

from rich.console import Console
from rich.prompt import Confirm

from .codegen.core.errors import FileWriteFailure, LevoError
from .codegen.output import write_file
from .logging_config import get_logger

logger = get_logger(__name__)

EXAMPLE_DIRECTORY = "example"


class ExampleDeclined(LevoError):
    """The user answered no to the confirmation prompt."""

    def __init__(self):
        super().__init__("User Input: n")


def output_example_workspace(
    base_dir: str | Path = ".",
    console: Optional[Console] = None,
    input_stream: Optional[TextIO] = None,
) -> Path:
    """
    Ask for confirmation, then create ``<base_dir>/example``.

    Returns:
        The created directory

    Raises:
        ExampleDeclined: If the user does not confirm
        FileWriteFailure: If the directory exists or a file cannot be written
    """
    confirmed = Confirm.ask(
        "We are about to create an example workspace. Are you sure?",
        console=console,
        default=True,
        stream=input_stream or sys.stdin,
    )
    if not confirmed:
        raise ExampleDeclined()

    root = Path(base_dir) / EXAMPLE_DIRECTORY
    if root.exists():
        raise FileWriteFailure(f"Directory named '{EXAMPLE_DIRECTORY}' already exists")

    templates = root / "templates"
    try:
        templates.mkdir(parents=True)
    except OSError as e:
        raise FileWriteFailure(f"Unable to create {templates}: {e}") from e

    for name, contents in EXAMPLE_FILES.items():
        write_file(root / name, contents.encode("utf-8"))

    logger.info("Created example workspace at %s", root)
    return root


CONFIG_CONTENTS = """{
  "TemplaterVersion": "1.0",
  "BasePackage": "com.pizzashop",
  "Language": "java",
  "ModelSchemaFileName": "schema.json",
  "TemplatesDirectory": "templates",
  "TemplateFeatures": [
    "Serialization"
  ],
  "Mappings": [
    {
      "ModelNames": [
        "Product"
      ],
      "TemplateNames": [
        "_Name_ListView.java.lt"
      ]
    },
    {
      "ModelNames": [
        "Pizza",
        "Topping"
      ],
      "TemplateNames": [
        "_Name_DescriptionView.java.lt"
      ]
    }
  ]
}
"""

SCHEMA_CONTENTS = """{
  "Project": "PizzaShop",
  "Models": [
    {
      "Name": "Product",
      "Parent": "",
      "Properties": [
        {
          "RemoteIdentifier": "Name",
          "PropertyType": "string"
        },
        {
          "RemoteIdentifier": "Price",
          "PropertyType": "string"
        }
      ]
    },
    {
      "Name": "Pizza",
      "Parent": "Product",
      "Properties": [
        {
          "RemoteIdentifier": "Toppings",
          "PropertyType": "[]Topping"
        }
      ]
    },
    {
      "Name": "Topping",
      "Parent": "",
      "Properties": [
        {
          "RemoteIdentifier": "Name",
          "PropertyType": "string"
        }
      ]
    }
  ]
}
"""

DESCRIPTION_VIEW_TEMPLATE = """\
{% macro java_type(prop) %}{% if prop is list_type %}List<{{ prop.property_type[2:] | pascal_case }}>{% else %}{{ prop.property_type | pascal_case }}{% endif %}{% endmacro %}
package {{ package_name }}.models;

{% if model.has_list_type %}
import java.util.List;
{% endif %}
{% if "Serialization" in features %}
import com.google.gson.annotations.SerializedName;
{% endif %}

public abstract class Abs{{ model.name }}{% if model.parent %} extends {{ model.parent }}{% endif %} {
    protected static class Fields {
{% for prop in model.properties %}
        public static final String {{ prop.remote_identifier | snake_case | upper }} = "{{ prop.remote_identifier }}";
{% endfor %}
    }

{% for prop in model.properties %}
{% if "Serialization" in features %}
    @SerializedName(Fields.{{ prop.remote_identifier | snake_case | upper }})
{% endif %}
    private {{ java_type(prop) }} m{{ prop.local_identifier | pascal_case }};
{% endfor %}
{% if "Accessors" in features %}
{% for prop in model.properties %}

    public {{ java_type(prop) }} get{{ prop.local_identifier | pascal_case }}() {
        return m{{ prop.local_identifier | pascal_case }};
    }

    public void set{{ prop.local_identifier | pascal_case }}(final {{ java_type(prop) }} {{ prop.local_identifier | camel_case }}) {
        m{{ prop.local_identifier | pascal_case }} = {{ prop.local_identifier | camel_case }};
    }
{% endfor %}
{% endif %}
}
"""

LIST_VIEW_TEMPLATE = """\
package {{ package_name }}.views;

import java.util.List;

import {{ package_name }}.models.{{ model.name }};

public class {{ model.name }}ListView {
    private final List<{{ model.name }}> mItems;

    public {{ model.name }}ListView(final List<{{ model.name }}> items) {
        mItems = items;
    }

    public int getCount() {
        return mItems.size();
    }
{% if "Accessors" in features %}

    public {{ model.name }} getItem(final int position) {
        return mItems.get(position);
    }
{% endif %}
}
"""

TEMPLATES_README = """\
# Example templates

Java model and view classes for the models of a schema.

#### Serialization
Annotates every field with the Gson SerializedName of its remote identifier.

#### Accessors
Adds a getter and a setter for every property, and item access to list views.
"""

README_CONTENTS = """
This workspace was created by 'levo --example'.

Generate the example sources with:

    levo --config config.json

List the optional features of the templates with:

    levo --template templates --list
"""

EXAMPLE_FILES = {
    "config.json": CONFIG_CONTENTS,
    "schema.json": SCHEMA_CONTENTS,
    "README": README_CONTENTS,
    "templates/_Name_DescriptionView.java.lt": DESCRIPTION_VIEW_TEMPLATE,
    "templates/_Name_ListView.java.lt": LIST_VIEW_TEMPLATE,
    "templates/README.md": TEMPLATES_README,
}
