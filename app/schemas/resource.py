"""Declarative admin-resource schemas: form fields, table columns, filters, actions and pages.

These models are what the presentation layer receives. Form field definitions also carry
the validation rules applied to submissions, so rendering and validation share one source.
"""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

FormContext = Literal["create", "edit"]
FieldType = Literal["text", "email", "password", "toggle", "multiselect"]
ColumnType = Literal["text", "boolean", "badge", "datetime"]
FilterType = Literal["ternary", "select"]


class SelectOption(BaseModel):
    """One option of a select field or filter."""

    value: str
    label: str


class FormField(BaseModel):
    """Form field as rendered for a given context (create or edit)."""

    name: str
    label: str
    type: FieldType
    required: bool = False
    min_length: int | None = None
    max_length: int | None = None
    unique: bool = False
    multiple: bool = False
    default: bool | str | None = None
    options: list[SelectOption] | None = None


class FormFieldDefinition(BaseModel):
    """
    Static definition of a form field and its rules.

    - required_on: contexts in which a blank value is a validation error.
    - keep_when_blank: a blank submission leaves the stored value untouched (e.g. password on edit).
    - hashed: the submitted value is stored only as a password hash.
    - visible_with: permission the actor needs for the field to be rendered and accepted.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    label: str
    type: FieldType
    required_on: frozenset[str] = frozenset()
    min_length: int | None = None
    max_length: int | None = None
    unique: bool = False
    multiple: bool = False
    default: bool | str | None = None
    keep_when_blank: bool = False
    hashed: bool = False
    visible_with: str | None = None

    def is_required(self, context: FormContext) -> bool:
        return context in self.required_on

    def render(
        self,
        context: FormContext,
        options: list[SelectOption] | None = None,
    ) -> FormField:
        return FormField(
            name=self.name,
            label=self.label,
            type=self.type,
            required=self.is_required(context),
            min_length=self.min_length,
            max_length=self.max_length,
            unique=self.unique,
            multiple=self.multiple,
            default=self.default,
            options=options,
        )


class TableColumn(BaseModel):
    """Listing column. colors maps a badge value to a color name; others get default_color."""

    model_config = ConfigDict(frozen=True)

    name: str
    label: str
    type: ColumnType = "text"
    searchable: bool = False
    sortable: bool = False
    toggleable: bool = False
    hidden_by_default: bool = False
    date_format: str | None = None
    colors: dict[str, str] = Field(default_factory=dict)
    default_color: str | None = None

    def color_for(self, value: str) -> str | None:
        return self.colors.get(value, self.default_color)


class TableFilter(BaseModel):
    """Listing filter: ternary (any/true/false) or select (optionally multiple)."""

    name: str
    label: str
    type: FilterType
    multiple: bool = False
    options: list[SelectOption] = Field(default_factory=list)


class PageRoute(BaseModel):
    """Page of the resource; mounted=False means declared but not routed."""

    model_config = ConfigDict(frozen=True)

    name: str
    path: str
    mounted: bool = True


class ResourceMeta(BaseModel):
    """Labels and navigation entry of a resource."""

    label: str
    plural_label: str
    navigation_label: str
    navigation_icon: str
    pages: list[PageRoute]
