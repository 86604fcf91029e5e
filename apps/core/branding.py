"""
Colour presets for tenant branding.

Each preset carries two token sets (light and dark). The tokens are
rendered as CSS custom properties and injected into every page by the
tenant_branding context processor.
"""

import re

DEFAULT_PRESET_ID = 'professional-blue'

COLOR_MODES = ('light', 'dark')


def _light_tokens(primary, sidebar, accent, sidebar_accent):
    return {
        'background': '#ffffff',
        'foreground': '#0f172a',
        'primary': primary,
        'primary_foreground': '#ffffff',
        'secondary': '#f1f5f9',
        'secondary_foreground': '#0f172a',
        'accent': accent,
        'accent_foreground': '#0f172a',
        'muted': '#f1f5f9',
        'muted_foreground': '#64748b',
        'sidebar': sidebar,
        'sidebar_foreground': '#f8fafc',
        'sidebar_primary': primary,
        'sidebar_primary_foreground': '#ffffff',
        'sidebar_accent': sidebar_accent,
        'sidebar_accent_foreground': '#f8fafc',
        'sidebar_border': sidebar_accent,
        'sidebar_ring': primary,
        'card': '#ffffff',
        'card_foreground': '#0f172a',
        'popover': '#ffffff',
        'popover_foreground': '#0f172a',
        'border': '#e2e8f0',
        'input': '#e2e8f0',
        'ring': primary,
        'destructive': '#dc2626',
    }


def _dark_tokens(primary, sidebar, accent, sidebar_accent):
    return {
        'background': '#020617',
        'foreground': '#f8fafc',
        'primary': primary,
        'primary_foreground': '#0f172a',
        'secondary': '#1e293b',
        'secondary_foreground': '#f8fafc',
        'accent': accent,
        'accent_foreground': '#f8fafc',
        'muted': '#1e293b',
        'muted_foreground': '#94a3b8',
        'sidebar': sidebar,
        'sidebar_foreground': '#f8fafc',
        'sidebar_primary': primary,
        'sidebar_primary_foreground': '#0f172a',
        'sidebar_accent': sidebar_accent,
        'sidebar_accent_foreground': '#f8fafc',
        'sidebar_border': sidebar_accent,
        'sidebar_ring': primary,
        'card': '#0f172a',
        'card_foreground': '#f8fafc',
        'popover': '#0f172a',
        'popover_foreground': '#f8fafc',
        'border': '#1e293b',
        'input': '#1e293b',
        'ring': primary,
        'destructive': '#ef4444',
    }


def _preset(preset_id, name, description, light, dark):
    return {
        'id': preset_id,
        'name': name,
        'description': description,
        'light': _light_tokens(*light),
        'dark': _dark_tokens(*dark),
        'preview': {
            'primary': light[0],
            'sidebar': light[1],
            'accent': light[2],
        },
    }


# (primary, sidebar, accent, sidebar_accent) per mode
COLOR_PRESETS = [
    _preset(
        'professional-blue', 'Professional Blue', 'Calm corporate blue',
        light=('#2563eb', '#1e3a8a', '#dbeafe', '#1e40af'),
        dark=('#60a5fa', '#0b1739', '#1e3a8a', '#172554'),
    ),
    _preset(
        'forest-green', 'Forest Green', 'Natural, growth-oriented green',
        light=('#16a34a', '#14532d', '#dcfce7', '#166534'),
        dark=('#4ade80', '#052e16', '#14532d', '#0f3d22'),
    ),
    _preset(
        'sunset-orange', 'Sunset Orange', 'Warm and energetic orange',
        light=('#ea580c', '#7c2d12', '#ffedd5', '#9a3412'),
        dark=('#fb923c', '#2a1007', '#7c2d12', '#431407'),
    ),
    _preset(
        'royal-purple', 'Royal Purple', 'Bold, creative purple',
        light=('#7c3aed', '#3b0764', '#ede9fe', '#581c87'),
        dark=('#a78bfa', '#1e0638', '#4c1d95', '#2e1065'),
    ),
    _preset(
        'slate-gray', 'Slate Gray', 'Neutral and understated',
        light=('#475569', '#0f172a', '#e2e8f0', '#1e293b'),
        dark=('#94a3b8', '#020617', '#334155', '#0f172a'),
    ),
    _preset(
        'crimson-red', 'Crimson Red', 'Confident, high-contrast red',
        light=('#dc2626', '#7f1d1d', '#fee2e2', '#991b1b'),
        dark=('#f87171', '#2a0a0a', '#7f1d1d', '#450a0a'),
    ),
]


def get_preset_by_id(preset_id):
    for preset in COLOR_PRESETS:
        if preset['id'] == preset_id:
            return preset
    return None


def is_valid_preset_id(preset_id):
    return get_preset_by_id(preset_id) is not None


def get_color_tokens(preset_id, mode):
    """Token dict for a preset in 'light' or 'dark' mode, or None."""
    preset = get_preset_by_id(preset_id)
    if preset is None or mode not in COLOR_MODES:
        return None
    return preset[mode]


def css_variable_name(token):
    """
    'sidebarPrimaryForeground' or 'sidebar_primary_foreground'
    -> 'sidebar-primary-foreground'
    """
    return re.sub(r'([A-Z])', r'-\1', token).replace('_', '-').lower()


def _tokens_to_css_vars(tokens):
    return '\n'.join(
        f'  --{css_variable_name(key)}: {value};'
        for key, value in tokens.items()
    )


def generate_color_css(preset_id):
    """
    CSS text with a :root block (light tokens) and a .dark block.

    Returns an empty string for an unknown preset id.
    """
    preset = get_preset_by_id(preset_id)
    if preset is None:
        return ''

    return (
        ':root {\n'
        f'{_tokens_to_css_vars(preset["light"])}\n'
        '}\n'
        '\n'
        '.dark {\n'
        f'{_tokens_to_css_vars(preset["dark"])}\n'
        '}'
    )


def get_tenant_color_css(tenant):
    """CSS for the tenant's preset, falling back to the default preset."""
    preset_id = getattr(tenant, 'color_scheme', None) or DEFAULT_PRESET_ID
    css = generate_color_css(preset_id)
    return css or generate_color_css(DEFAULT_PRESET_ID)
