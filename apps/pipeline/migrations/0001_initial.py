import django.core.validators
import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('core', '0001_initial'),
        ('automations', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='Pipeline',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(max_length=200)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('tenant', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='pipelines', to='core.tenant')),
            ],
            options={
                'verbose_name': 'Pipeline',
                'verbose_name_plural': 'Pipelines',
                'ordering': ['created_at'],
            },
        ),
        migrations.CreateModel(
            name='Stage',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(help_text='Stage name (e.g. Qualified)', max_length=100)),
                ('position', models.PositiveIntegerField(default=0, help_text='Column order on the board (lower = left)')),
                ('probability_percent', models.PositiveSmallIntegerField(default=0, help_text='Chance a deal in this stage closes (used by the forecast)', validators=[django.core.validators.MinValueValidator(0), django.core.validators.MaxValueValidator(100)])),
                ('is_won', models.BooleanField(default=False, help_text='Deals here count as won')),
                ('is_lost', models.BooleanField(default=False, help_text='Deals here count as lost')),
                ('color', models.CharField(default='#667eea', help_text='Hex color code for UI display', max_length=7)),
                ('pipeline', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='stages', to='pipeline.pipeline')),
            ],
            options={
                'verbose_name': 'Stage',
                'verbose_name_plural': 'Stages',
                'ordering': ['position', 'id'],
                'indexes': [models.Index(fields=['pipeline', 'position'], name='stage_pipeline_position_idx')],
            },
        ),
        migrations.CreateModel(
            name='StageAutomation',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('position', models.PositiveIntegerField(default=0)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('stage', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='automations', to='pipeline.stage')),
                ('template', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='stage_automations', to='automations.automationtemplate')),
            ],
            options={
                'verbose_name': 'Stage Automation',
                'verbose_name_plural': 'Stage Automations',
                'ordering': ['position', 'id'],
                'constraints': [models.UniqueConstraint(fields=('stage', 'template'), name='unique_stage_template')],
            },
        ),
    ]
