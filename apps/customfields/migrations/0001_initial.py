import django.core.validators
import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('core', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='CustomField',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('object_type', models.CharField(choices=[('contact', 'Contact'), ('company', 'Company'), ('deal', 'Deal')], max_length=10)),
                ('key', models.CharField(help_text='Machine name, e.g. lead_source', max_length=100, validators=[django.core.validators.RegexValidator(message='Use lowercase letters and underscores only', regex='^[a-z_]+$')])),
                ('label', models.CharField(max_length=200)),
                ('field_type', models.CharField(choices=[('text', 'Text'), ('number', 'Number'), ('date', 'Date'), ('select', 'Select')], default='text', max_length=10)),
                ('required', models.BooleanField(default=False)),
                ('options', models.JSONField(blank=True, help_text='Select options: [{"value": ..., "label": ...}]', null=True)),
                ('position', models.PositiveIntegerField(default=0)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('tenant', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='custom_fields', to='core.tenant')),
            ],
            options={
                'verbose_name': 'Custom Field',
                'verbose_name_plural': 'Custom Fields',
                'ordering': ['object_type', 'position', 'id'],
                'constraints': [models.UniqueConstraint(fields=('tenant', 'object_type', 'key'), name='unique_custom_field_key')],
            },
        ),
        migrations.CreateModel(
            name='CustomFieldValue',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('object_type', models.CharField(choices=[('contact', 'Contact'), ('company', 'Company'), ('deal', 'Deal')], max_length=10)),
                ('object_id', models.PositiveBigIntegerField()),
                ('value', models.JSONField()),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('field', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='values', to='customfields.customfield')),
                ('tenant', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='custom_field_values', to='core.tenant')),
            ],
            options={
                'verbose_name': 'Custom Field Value',
                'verbose_name_plural': 'Custom Field Values',
                'indexes': [models.Index(fields=['tenant', 'object_type', 'object_id'], name='cfvalue_object_idx')],
                'constraints': [models.UniqueConstraint(fields=('tenant', 'object_type', 'object_id', 'field'), name='unique_custom_field_value')],
            },
        ),
    ]
